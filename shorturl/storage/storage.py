"""
Storage module for the Short URL service (in-memory implementation).

Responsibilities:
    - Hold every UrlEntry keyed by shortcode for the process lifetime
    - Reject duplicate shortcodes on insert
    - Append click records without losing concurrent updates
    - Provide lookup and listing APIs

Design:
    - A plain dict guarded by one lock. Every mutation (insert, click append)
      runs under the lock; reads of a single key are plain dict lookups.
    - Nothing is persisted: a restart yields an empty store.
"""

import threading
from typing import Dict, List, Tuple

from ..errors import Conflict, NotFound
from ..models import Click, UrlEntry
from .base import BaseStorage


class Storage(BaseStorage):
    def __init__(self):
        """
        Initialize an empty store.

        Internal schema:
            self.entries = {shortcode: UrlEntry}
        """
        self.entries: Dict[str, UrlEntry] = {}
        self._lock = threading.Lock()

    def create(self, code: str, entry: UrlEntry) -> None:
        """
        Insert ``entry`` under ``code``.

        Raises:
            Conflict: If the code is already stored. Under a race on the same
                code exactly one caller wins.
        """
        with self._lock:
            if code in self.entries:
                raise Conflict("Shortcode already in use")
            self.entries[code] = entry

    def get(self, code: str) -> UrlEntry:
        entry = self.entries.get(code)
        if entry is None:
            raise NotFound("Shortcode not found")
        return entry

    def list_all(self) -> List[Tuple[str, UrlEntry]]:
        with self._lock:
            return list(self.entries.items())

    def append_click(self, code: str, click: Click) -> None:
        """
        Append a click to an entry.

        Raises:
            NotFound: If the code is unknown.
        """
        with self._lock:
            entry = self.entries.get(code)
            if entry is None:
                raise NotFound("Shortcode not found")
            entry.clicks.append(click)

    def __contains__(self, code: object) -> bool:
        return code in self.entries

    def __len__(self) -> int:
        return len(self.entries)
