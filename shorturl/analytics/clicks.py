"""
Click recording for the Short URL service.

Responsibilities:
    - Build a Click record for one redirect (timestamp, referrer, geo)
    - Append it to the entry's click list through the store

The geo field is a placeholder value; no IP lookup is performed.
"""

import logging
from typing import Optional

from ..config import settings
from ..models import Click
from ..storage.base import BaseStorage
from ..timeutils import Clock, utc_now

DIRECT_REFERRER = "Direct"

log = logging.getLogger("shorturl.analytics")


class ClickRecorder:
    def __init__(self, storage: BaseStorage, clock: Clock = utc_now, geo: Optional[str] = None):
        self.storage = storage
        self.clock = clock
        self.geo = geo or settings.GEO_PLACEHOLDER

    def record(self, code: str, referrer: Optional[str] = None) -> Click:
        """
        Append a click for ``code`` and return it.

        Args:
            code: Shortcode that was followed.
            referrer: Value of the Referer header; empty or missing means "Direct".

        Raises:
            NotFound: If the code is unknown to the store.
        """
        click = Click(
            timestamp=self.clock(),
            referrer=referrer or DIRECT_REFERRER,
            geo=self.geo,
        )
        self.storage.append_click(code, click)
        log.debug("Click recorded for %s (referrer=%s)", code, click.referrer)
        return click
