"""
Global pytest fixtures for the Short URL service test suite.

Responsibilities:
    - Provide a fresh FastAPI TestClient via the app factory for integration tests
    - Provide an isolated in-memory Storage and a controllable clock
    - Provide a UrlManager wired to those fixtures
    - Capture remote log records without touching the network

Why an app factory?
    Using `create_app()` gives each test its own store, so no state leaks
    between tests.
"""

import random
from datetime import datetime, timedelta, timezone
from typing import Dict, List

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shorturl.logsink.log_client import LogClient, build_record
from shorturl.manager.shortcode import ShortcodeGenerator
from shorturl.manager.url_manager import UrlManager
from shorturl.storage.storage import Storage


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class RecordingLogClient(LogClient):
    """LogClient that validates records like the real one but only keeps them in memory."""

    def __init__(self):
        super().__init__(endpoint="http://logs.invalid/logs", token="")
        self.records: List[Dict[str, str]] = []

    def log(self, stack: str, level: str, package: str, message: str) -> None:
        self.records.append(build_record(stack, level, package, message))

    def messages(self, level: str = None) -> List[str]:
        return [r["message"] for r in self.records if level is None or r["level"] == level]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def storage() -> Storage:
    """Provide a fresh in-memory Storage backend."""
    return Storage()


@pytest.fixture
def log_client() -> RecordingLogClient:
    return RecordingLogClient()


@pytest.fixture
def manager(storage: Storage, clock: FakeClock) -> UrlManager:
    """UrlManager on the storage fixture, a seeded generator and the fake clock."""
    return UrlManager(storage=storage, generator=ShortcodeGenerator(rng=random.Random(42)), clock=clock)


@pytest.fixture
def app(storage, log_client, clock):
    return create_app(storage=storage, log_client=log_client, clock=clock)


@pytest.fixture
def client(app) -> TestClient:
    """
    Provide a fresh TestClient with a new app instance.

    Redirects are not followed so tests can assert on the 302 itself.
    """
    return TestClient(app, follow_redirects=False)
