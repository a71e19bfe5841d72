"""
UrlManager module for the Short URL service.

Responsibilities:
    - Validate create requests (URL, validity, optional custom shortcode)
    - Reserve a unique shortcode, custom or generated
    - Compute creation and expiry dates
    - Serve stats, listing and redirect lookups
    - Record clicks on redirect, refusing expired links

Design notes:
    - Storage, generator, click recorder and clock are injected; routes only
      translate HTTP to these calls and render the results.
    - Uniqueness is enforced by the store's atomic ``create``. A generated code
      that loses an insert race is simply regenerated; a custom code that loses
      is reported as a conflict.
    - Expiry is evaluated lazily against the clock. Nothing is ever removed.
"""

import logging
from datetime import timedelta
from typing import Any, List, Optional

from ..analytics.clicks import ClickRecorder
from ..errors import BadRequest, Conflict, Gone
from ..models import UrlEntry
from ..storage.base import BaseStorage
from ..timeutils import Clock, utc_now
from ..validators import (
    DEFAULT_VALIDITY_MINUTES,
    InvalidValidity,
    is_valid_shortcode,
    is_valid_url,
    resolve_validity,
)
from .shortcode import ShortcodeGenerator

log = logging.getLogger("shorturl.manager")


class UrlManager:
    """Coordinates creation, lookup and redirect rules for short URLs."""

    def __init__(
        self,
        storage: BaseStorage,
        generator: Optional[ShortcodeGenerator] = None,
        clicks: Optional[ClickRecorder] = None,
        clock: Clock = utc_now,
        default_validity: int = DEFAULT_VALIDITY_MINUTES,
    ):
        """
        Args:
            storage (BaseStorage): Entry store shared by all requests.
            generator (Optional[ShortcodeGenerator]): Code generator; 6-char random by default.
            clicks (Optional[ClickRecorder]): Click recorder; built on ``storage`` by default.
            clock (Clock): Returns the current UTC time.
            default_validity (int): Minutes applied when a request gives no validity.
        """
        self.storage = storage
        self.generator = generator or ShortcodeGenerator()
        self.clock = clock
        self.clicks = clicks or ClickRecorder(storage, clock=clock)
        self.default_validity = default_validity

    # ---------------------------------------------------------------------
    # Create
    # ---------------------------------------------------------------------
    def create_short_url(
        self,
        url: Optional[str],
        validity: Any = None,
        shortcode: Optional[str] = None,
    ) -> UrlEntry:
        """
        Create and store a new entry.

        Rules:
            - ``url`` is required and must be http/https.
            - ``validity`` defaults to the configured minutes; must be a positive integer.
            - A non-empty ``shortcode`` must be 4-20 alphanumerics and unused.
            - Without a shortcode a fresh code is generated.

        Returns:
            UrlEntry: The stored entry, with no clicks.

        Raises:
            BadRequest: Missing or malformed url, validity or shortcode.
            Conflict: Custom shortcode already in use.
        """
        if not url:
            raise BadRequest("Missing required field: url")
        if not is_valid_url(url):
            raise BadRequest("Invalid URL format")

        try:
            minutes = resolve_validity(validity, default=self.default_validity)
        except InvalidValidity:
            raise BadRequest("Validity must be a positive integer") from None

        if shortcode and not is_valid_shortcode(shortcode):
            raise BadRequest("Shortcode must be alphanumeric and 4-20 characters long")

        creation_date = self.clock()
        try:
            expiry_date = creation_date + timedelta(minutes=minutes)
        except OverflowError:
            raise BadRequest("Validity is too large") from None

        if shortcode:
            entry = UrlEntry(shortcode, url, creation_date, expiry_date)
            self.storage.create(shortcode, entry)
            log.info("Created custom shortcode %s -> %s", shortcode, url)
            return entry

        while True:
            code = self.generator.generate(self.storage)
            entry = UrlEntry(code, url, creation_date, expiry_date)
            try:
                self.storage.create(code, entry)
            except Conflict:
                log.debug("Generated shortcode %s was taken concurrently; retrying", code)
                continue
            log.info("Generated shortcode %s -> %s", code, url)
            return entry

    # ---------------------------------------------------------------------
    # Reads
    # ---------------------------------------------------------------------
    def get_stats(self, shortcode: str) -> UrlEntry:
        """
        Raises:
            NotFound: Unknown shortcode.
        """
        return self.storage.get(shortcode)

    def list_all(self) -> List[UrlEntry]:
        """Every stored entry, expired ones included."""
        return [entry for _, entry in self.storage.list_all()]

    # ---------------------------------------------------------------------
    # Redirect
    # ---------------------------------------------------------------------
    def resolve_redirect(self, shortcode: str, referrer: Optional[str] = None) -> UrlEntry:
        """
        Look up a shortcode for redirection and record the click.

        Raises:
            NotFound: Unknown shortcode.
            Gone: The entry is past its expiry date; no click is recorded.
        """
        entry = self.storage.get(shortcode)
        if entry.is_expired(self.clock()):
            raise Gone("Link has expired")
        self.clicks.record(shortcode, referrer)
        return entry
