"""
Pydantic request/response models for the Short URL API.

Field names follow the public JSON contract (camelCase). Request fields accept
any JSON value at the schema level; UrlManager checks url, validity and
shortcode in that order so the first failing field decides the 400 message.
"""

from typing import Any, List

from pydantic import BaseModel

from .models import Click, UrlEntry
from .timeutils import iso_z


class CreateShortUrlRequest(BaseModel):
    """Request payload for creating a short URL."""
    url: Any = None
    validity: Any = None
    shortcode: Any = None


class CreateShortUrlResponse(BaseModel):
    shortLink: str
    expiry: str


class ClickOut(BaseModel):
    timestamp: str
    referrer: str
    geo: str

    @classmethod
    def from_click(cls, click: Click) -> "ClickOut":
        return cls(timestamp=iso_z(click.timestamp), referrer=click.referrer, geo=click.geo)


class StatsResponse(BaseModel):
    totalClicks: int
    originalUrl: str
    creationDate: str
    expiryDate: str
    clicks: List[ClickOut]

    @classmethod
    def from_entry(cls, entry: UrlEntry) -> "StatsResponse":
        # snapshot first so totalClicks and clicks agree under concurrent appends
        clicks = list(entry.clicks)
        return cls(
            totalClicks=len(clicks),
            originalUrl=entry.original_url,
            creationDate=iso_z(entry.creation_date),
            expiryDate=iso_z(entry.expiry_date),
            clicks=[ClickOut.from_click(c) for c in clicks],
        )


class UrlSummary(BaseModel):
    shortcode: str
    originalUrl: str
    creationDate: str
    expiryDate: str
    totalClicks: int

    @classmethod
    def from_entry(cls, entry: UrlEntry) -> "UrlSummary":
        return cls(
            shortcode=entry.shortcode,
            originalUrl=entry.original_url,
            creationDate=iso_z(entry.creation_date),
            expiryDate=iso_z(entry.expiry_date),
            totalClicks=entry.total_clicks,
        )


class ErrorResponse(BaseModel):
    error: str
