"""
Runtime configuration for the Short URL service
===============================================

Simple settings module that reads from environment variables (only here),
and exposes a stable `settings` object for the rest of the codebase.
Avoid reading env vars anywhere else; import from this module instead.

Server
------
- PORT                      : listen port (default 3000)
- HOST                      : bind address (default "0.0.0.0")
- SHORTURL_BASE_URL         : optional public base for short links, e.g. "https://sho.rt"

Short links
-----------
- SHORTURL_DEFAULT_VALIDITY : minutes a link stays active when none is given (default 30)
- SHORTURL_CODE_LENGTH      : generated code length; default 6; clamped to [4, 20]
- SHORTURL_GEO_PLACEHOLDER  : geo value stored on each click (default "US")
- SHORTURL_STORAGE_BACKEND  : "memory" (default)

Remote log sink
---------------
- LOG_ENDPOINT              : URL receiving structured log records
- LOG_TOKEN / ACCESS_TOKEN  : bearer token for the log sink (LOG_TOKEN wins)
- LOG_TIMEOUT               : seconds before a log send is abandoned (default 5)
- LOG_LEVEL                 : local console level (default "INFO")
"""

import os


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default))
    try:
        return float(raw)
    except ValueError:
        return default


class _Settings:
    # -------- Server --------
    PORT: int = _get_int("PORT", 3000)
    HOST: str = os.getenv("HOST", "0.0.0.0")
    BASE_URL: str = os.getenv("SHORTURL_BASE_URL", "").strip().rstrip("/")

    # -------- Short links --------
    DEFAULT_VALIDITY_MINUTES: int = max(1, _get_int("SHORTURL_DEFAULT_VALIDITY", 30))
    CODE_LENGTH: int = max(4, min(20, _get_int("SHORTURL_CODE_LENGTH", 6)))
    GEO_PLACEHOLDER: str = os.getenv("SHORTURL_GEO_PLACEHOLDER", "US")
    STORAGE_BACKEND: str = os.getenv("SHORTURL_STORAGE_BACKEND", "memory").strip().lower()

    # -------- Remote log sink --------
    LOG_ENDPOINT: str = os.getenv("LOG_ENDPOINT", "http://20.244.56.144/evaluation-service/logs")
    LOG_TOKEN: str = os.getenv("LOG_TOKEN") or os.getenv("ACCESS_TOKEN") or ""
    LOG_TIMEOUT: float = _get_float("LOG_TIMEOUT", 5.0)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()


settings = _Settings()
