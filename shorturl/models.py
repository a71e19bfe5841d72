"""
Domain records for the Short URL service.

UrlEntry
    One shortened link. Identity and dates are fixed at creation; only the
    click list grows, and only through the store's ``append_click``.

Click
    One redirect event.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List


@dataclass(frozen=True)
class Click:
    timestamp: datetime
    referrer: str
    geo: str


@dataclass
class UrlEntry:
    shortcode: str
    original_url: str
    creation_date: datetime
    expiry_date: datetime
    clicks: List[Click] = field(default_factory=list)

    @property
    def total_clicks(self) -> int:
        return len(self.clicks)

    def is_expired(self, now: datetime) -> bool:
        """
        True once ``now`` is strictly past the expiry date.

        A redirect exactly at ``expiry_date`` is still served.
        """
        return now > self.expiry_date
