"""
Storage factory: pick the entry store backend from config
=========================================================

This module centralizes selection of the storage backend so the rest of the
app can stay ignorant of where entries live.

- Reads the environment **at call time** to avoid stale values in tests.
- Only the in-memory backend ships today; the factory is the single place a
  persistent backend would be wired in.

Environment variables
---------------------
- SHORTURL_STORAGE_BACKEND: "memory" (default)
"""

import logging
import os
from typing import Optional

from shorturl.storage.base import BaseStorage
from shorturl.storage.storage import Storage

log = logging.getLogger("shorturl.storage")


def get_storage(backend: Optional[str] = None) -> BaseStorage:
    """
    Return a store based on configuration.

    Parameters
    ----------
    backend : str, optional
        "memory" (default). If omitted, reads SHORTURL_STORAGE_BACKEND.

    Returns
    -------
    BaseStorage-compatible instance

    Raises
    ------
    ValueError
        For an unknown backend name.
    """
    be = (backend or os.getenv("SHORTURL_STORAGE_BACKEND", "memory")).strip().lower()
    log.debug("Selected storage backend: %r", be)

    if be == "memory":
        return Storage()

    raise ValueError(f"Unknown storage backend: {be!r}")
