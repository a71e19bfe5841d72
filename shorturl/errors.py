"""
Error taxonomy for the Short URL service.

Each error carries the HTTP status it maps to, so the API layer can render
every failure the same way: ``{"error": <message>}`` with ``status_code``.
"""


class ShortUrlError(Exception):
    """Base class for failures surfaced to HTTP clients."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(ShortUrlError):
    """Malformed or missing input."""
    status_code = 400


class Conflict(ShortUrlError):
    """Shortcode already taken."""
    status_code = 409


class NotFound(ShortUrlError):
    """Unknown shortcode."""
    status_code = 404


class Gone(ShortUrlError):
    """Shortcode exists but has expired."""
    status_code = 410


class Internal(ShortUrlError):
    """Unexpected fault caught at the outer boundary."""
    status_code = 500
