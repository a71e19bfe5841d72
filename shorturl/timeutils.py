"""
UTC clock and timestamp formatting helpers.

All timestamps in the service are timezone-aware UTC datetimes truncated to
millisecond precision, so the stored value and its serialized form agree.
"""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def iso_z(dt: datetime) -> str:
    """Format as ISO 8601 UTC with milliseconds and a 'Z' suffix."""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
