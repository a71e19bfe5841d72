"""
Input validation for short URL requests.

Pure functions with no service dependencies:
    - is_valid_url: http/https scheme followed by at least one non-space, non-quote char
    - is_valid_shortcode: 4-20 alphanumeric characters
    - resolve_validity: coerce a validity value (minutes) to a positive int
"""

import re
from typing import Any, Optional

DEFAULT_VALIDITY_MINUTES = 30

_URL_PATTERN = re.compile(r'(http|https)://[^ "]+')
_SHORTCODE_PATTERN = re.compile(r"[a-zA-Z0-9]{4,20}")


class InvalidValidity(ValueError):
    """Raised when a validity value is not a positive integer number of minutes."""


def is_valid_url(url: Any) -> bool:
    if not isinstance(url, str):
        return False
    return _URL_PATTERN.fullmatch(url) is not None


def is_valid_shortcode(code: Any) -> bool:
    if not isinstance(code, str):
        return False
    return _SHORTCODE_PATTERN.fullmatch(code) is not None


def resolve_validity(value: Any, default: Optional[int] = None) -> int:
    """
    Resolve a validity in minutes.

    ``None`` yields ``default`` (30 minutes unless overridden). Integers pass
    through, integral floats and numeric strings are coerced. Anything that
    does not end up as a positive integer raises InvalidValidity.
    """
    if value is None:
        return DEFAULT_VALIDITY_MINUTES if default is None else default

    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise InvalidValidity(f"Invalid validity: {value!r}")

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidValidity(f"Invalid validity: {value!r}")
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                raise InvalidValidity(f"Invalid validity: {value!r}") from None

    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidValidity(f"Invalid validity: {value!r}")
        value = int(value)

    if not isinstance(value, int) or value <= 0:
        raise InvalidValidity(f"Invalid validity: {value!r}")
    return value
