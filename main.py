"""
Main API module for the Short URL service.

Responsibilities:
    - Expose REST endpoints for creating short URLs, reading their stats,
      listing every entry and redirecting
    - Record a click (timestamp, referrer, geo) on every successful redirect
    - Render every failure as ``{"error": <message>}`` with its HTTP status
    - Report each request outcome to the remote log sink, best effort

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - In-memory Storage by default; any BaseStorage can be injected.
    - UrlManager owns validation, shortcode reservation and expiry rules;
      routes only translate HTTP to manager calls.
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shorturl.analytics.clicks import ClickRecorder
from shorturl.config import settings
from shorturl.errors import Gone, Internal, ShortUrlError
from shorturl.logsink.log_client import LogClient, LogValidationError
from shorturl.manager.shortcode import ShortcodeGenerator
from shorturl.manager.url_manager import UrlManager
from shorturl.schemas import (
    CreateShortUrlRequest,
    CreateShortUrlResponse,
    ErrorResponse,
    StatsResponse,
    UrlSummary,
)
from shorturl.storage.base import BaseStorage
from shorturl.storage.storage_factory import get_storage
from shorturl.timeutils import Clock, iso_z, utc_now


def create_app(
    storage: Optional[BaseStorage] = None,
    log_client: Optional[LogClient] = None,
    generator: Optional[ShortcodeGenerator] = None,
    clock: Clock = utc_now,
    base_url: Optional[str] = None,
) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        storage: Entry store; defaults to the configured backend (in-memory).
        log_client: Remote log sink; defaults to one built from settings.
        generator: Shortcode generator; defaults to random codes of CODE_LENGTH.
        clock: Returns the current UTC time; tests inject a fixed clock.
        base_url: Public base for short links; defaults to SHORTURL_BASE_URL,
            then to the base URL of the incoming request.

    Returns:
        FastAPI: A fully configured application with its own isolated store.
    """
    log = logging.getLogger("shorturl")

    # basic console logging
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
            format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )

    # ----------------------------------------------------------------
    # Per-app instances (isolated for tests, swappable for production)
    # ----------------------------------------------------------------
    storage = storage if storage is not None else get_storage(settings.STORAGE_BACKEND)
    log_client = log_client or LogClient(
        endpoint=settings.LOG_ENDPOINT,
        token=settings.LOG_TOKEN,
        timeout=settings.LOG_TIMEOUT,
    )
    generator = generator or ShortcodeGenerator(length=settings.CODE_LENGTH)
    clicks = ClickRecorder(storage, clock=clock, geo=settings.GEO_PLACEHOLDER)
    manager = UrlManager(
        storage=storage,
        generator=generator,
        clicks=clicks,
        clock=clock,
        default_validity=settings.DEFAULT_VALIDITY_MINUTES,
    )
    public_base = (base_url if base_url is not None else settings.BASE_URL).rstrip("/")

    def remote_log(level: str, package: str, message: str) -> None:
        """Send a backend record to the log sink; never raises."""
        try:
            log_client.log("backend", level, package, message)
        except LogValidationError:
            log.exception("Rejected log record: %s", message)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        remote_log("info", "route", f"Server started on port {settings.PORT}")
        yield
        await log_client.drain()

    app = FastAPI(
        title="Short URL Service",
        description="URL shortener with expiring links and click analytics",
        docs_url="/_docs",
        redoc_url=None,
        openapi_url="/_openapi.json",
        lifespan=lifespan,
    )
    app.state.storage = storage
    app.state.manager = manager
    app.state.log_client = log_client

    def short_link(request: Request, code: str) -> str:
        if public_base:
            return f"{public_base}/{code}"
        return str(request.url_for("redirect_short_url", shortcode=code))

    # ----------------------------------------------------------------
    # Error handling
    # ----------------------------------------------------------------
    @app.exception_handler(ShortUrlError)
    async def short_url_error_handler(request: Request, exc: ShortUrlError) -> JSONResponse:
        level = "warn" if isinstance(exc, Gone) else "error"
        remote_log(level, "route", f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # field values are checked by UrlManager; only unparseable bodies land here
        message = "Invalid request body"
        remote_log("error", "route", f"{request.method} {request.url.path}: {message}")
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        remote_log("fatal", "handler", f"Unhandled error: {exc}")
        err = Internal("Internal server error")
        return JSONResponse(status_code=err.status_code, content={"error": err.message})

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    # underscore paths cannot collide with alphanumeric shortcodes
    @app.get("/_health")
    async def health():
        return {"status": "ok"}

    @app.post(
        "/shorturls",
        status_code=201,
        response_model=CreateShortUrlResponse,
        responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    )
    async def create_short_url(
        request: Request,
        payload: Optional[CreateShortUrlRequest] = None,
    ) -> CreateShortUrlResponse:
        """
        Create a short URL.

        Body: ``{url, validity?, shortcode?}``; validity in minutes (default 30).
        Returns 201 with ``{shortLink, expiry}``.
        """
        payload = payload or CreateShortUrlRequest()
        entry = manager.create_short_url(payload.url, payload.validity, payload.shortcode)
        if not payload.shortcode:
            remote_log("info", "route", f"Generated unique shortcode: {entry.shortcode}")

        link = short_link(request, entry.shortcode)
        expiry = iso_z(entry.expiry_date)
        remote_log("info", "route", f"Created short URL: {link} for {entry.original_url}, expires at {expiry}")
        return CreateShortUrlResponse(shortLink=link, expiry=expiry)

    @app.get(
        "/shorturls/{shortcode}",
        response_model=StatsResponse,
        responses={404: {"model": ErrorResponse}},
    )
    async def get_stats(shortcode: str) -> StatsResponse:
        """Click statistics for one shortcode."""
        stats = StatsResponse.from_entry(manager.get_stats(shortcode))
        remote_log("info", "route", f"Retrieved stats for shortcode: {shortcode}")
        return stats

    @app.get("/shorturls", response_model=List[UrlSummary])
    async def list_short_urls() -> List[UrlSummary]:
        """Summaries of every stored short URL, expired ones included."""
        summaries = [UrlSummary.from_entry(e) for e in manager.list_all()]
        remote_log("info", "route", "Retrieved all short URLs")
        return summaries

    @app.get(
        "/{shortcode}",
        status_code=302,
        response_class=RedirectResponse,
        responses={404: {"model": ErrorResponse}, 410: {"model": ErrorResponse}},
        name="redirect_short_url",
    )
    async def redirect_short_url(shortcode: str, request: Request) -> RedirectResponse:
        """Record a click and redirect to the original URL."""
        entry = manager.resolve_redirect(shortcode, referrer=request.headers.get("referer"))
        remote_log("info", "route", f"Click recorded for {shortcode}")
        return RedirectResponse(url=entry.original_url, status_code=302)

    log.info("Short URL service ready (storage=%s)", type(storage).__name__)
    return app


# `uvicorn main:app` and `from main import app` continue to work.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
