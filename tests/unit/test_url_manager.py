"""
Unit tests for UrlManager.

Covers:
    - create: missing/invalid url, validity rules, custom shortcode rules,
      generated codes, expiry arithmetic
    - conflicts on custom shortcodes and regeneration on generated ones
    - stats and listing (expired entries included)
    - redirect: click recording, strict expiry boundary, no click when expired
"""

import random
import re
from datetime import timedelta

import pytest

from shorturl.errors import BadRequest, Conflict, Gone, NotFound
from shorturl.manager.shortcode import ShortcodeGenerator
from shorturl.manager.url_manager import UrlManager
from shorturl.models import UrlEntry
from shorturl.storage.storage import Storage

SHORTCODE_PATTERN = re.compile(r"^[a-zA-Z0-9]{4,20}$")


# -------------------------
# Create: validation
# -------------------------

@pytest.mark.parametrize("url", [None, ""])
def test_create_requires_url(manager, url):
    with pytest.raises(BadRequest, match="Missing required field: url"):
        manager.create_short_url(url)


@pytest.mark.parametrize("url", ["not-a-url", "ftp://example.com", "https://", "https://a b.com"])
def test_create_rejects_invalid_url(manager, url):
    with pytest.raises(BadRequest, match="Invalid URL format"):
        manager.create_short_url(url)


@pytest.mark.parametrize("validity", [0, -1, "abc", 1.5, True])
def test_create_rejects_invalid_validity(manager, validity):
    with pytest.raises(BadRequest, match="Validity must be a positive integer"):
        manager.create_short_url("https://example.com", validity=validity)


def test_create_rejects_overflowing_validity(manager):
    with pytest.raises(BadRequest, match="Validity is too large"):
        manager.create_short_url("https://example.com", validity=10 ** 12)


@pytest.mark.parametrize("shortcode", ["ab", "abc", "a" * 21, "bad-code", "has space"])
def test_create_rejects_invalid_shortcode(manager, shortcode):
    with pytest.raises(BadRequest, match="Shortcode must be alphanumeric and 4-20 characters long"):
        manager.create_short_url("https://example.com", shortcode=shortcode)


def test_failed_create_stores_nothing(manager, storage):
    with pytest.raises(BadRequest):
        manager.create_short_url("https://example.com", validity=0, shortcode="abcd1234")
    assert len(storage) == 0


# -------------------------
# Create: success paths
# -------------------------

def test_create_generates_six_char_code(manager, storage, clock):
    entry = manager.create_short_url("https://example.com", validity=10)
    assert SHORTCODE_PATTERN.match(entry.shortcode)
    assert len(entry.shortcode) == 6
    assert entry.creation_date == clock()
    assert entry.expiry_date == entry.creation_date + timedelta(minutes=10)
    assert entry.clicks == []
    assert storage.get(entry.shortcode) is entry


def test_create_default_validity_is_thirty_minutes(manager):
    entry = manager.create_short_url("https://example.com")
    assert entry.expiry_date - entry.creation_date == timedelta(minutes=30)


def test_create_numeric_string_validity(manager):
    entry = manager.create_short_url("https://example.com", validity="45")
    assert entry.expiry_date - entry.creation_date == timedelta(minutes=45)


def test_create_configured_default_validity(storage, clock):
    manager = UrlManager(storage, clock=clock, default_validity=5)
    entry = manager.create_short_url("https://example.com")
    assert entry.expiry_date - entry.creation_date == timedelta(minutes=5)


def test_create_with_custom_shortcode(manager, storage):
    entry = manager.create_short_url("https://example.com", shortcode="abcd1234")
    assert entry.shortcode == "abcd1234"
    assert "abcd1234" in storage


def test_empty_shortcode_means_generated(manager):
    entry = manager.create_short_url("https://example.com", shortcode="")
    assert len(entry.shortcode) == 6


def test_custom_shortcode_conflict(manager):
    manager.create_short_url("https://one.com", shortcode="abcd1234")
    with pytest.raises(Conflict, match="Shortcode already in use"):
        manager.create_short_url("https://two.com", shortcode="abcd1234")


def test_same_custom_shortcode_never_succeeds_twice(manager, storage):
    outcomes = []
    for _ in range(5):
        try:
            manager.create_short_url("https://example.com", shortcode="samecode")
            outcomes.append("created")
        except Conflict:
            outcomes.append("conflict")
    assert outcomes.count("created") == 1
    assert len(storage) == 1


def test_generated_codes_never_collide(manager, storage):
    codes = [manager.create_short_url(f"https://example.com/{i}").shortcode for i in range(500)]
    assert len(set(codes)) == 500
    assert len(storage) == 500


class RacingStorage(Storage):
    """Store where another writer grabs the first generated code between check and insert."""

    def __init__(self):
        super().__init__()
        self.stolen = None

    def create(self, code, entry):
        if self.stolen is None:
            self.stolen = code
            super().create(code, UrlEntry(code, "https://other.com", entry.creation_date, entry.expiry_date))
        super().create(code, entry)


def test_generated_code_lost_race_is_regenerated(clock):
    storage = RacingStorage()
    manager = UrlManager(storage, generator=ShortcodeGenerator(rng=random.Random(5)), clock=clock)
    entry = manager.create_short_url("https://example.com")
    assert entry.shortcode != storage.stolen
    assert storage.get(storage.stolen).original_url == "https://other.com"
    assert storage.get(entry.shortcode) is entry


# -------------------------
# Reads
# -------------------------

def test_get_stats_unknown(manager):
    with pytest.raises(NotFound, match="Shortcode not found"):
        manager.get_stats("unknown")


def test_get_stats_idempotent(manager):
    code = manager.create_short_url("https://example.com").shortcode
    manager.resolve_redirect(code)
    first = list(manager.get_stats(code).clicks)
    second = list(manager.get_stats(code).clicks)
    assert first == second
    assert manager.get_stats(code).total_clicks == 1


def test_list_all_includes_expired(manager, clock):
    old = manager.create_short_url("https://old.com", validity=1)
    clock.advance(minutes=5)
    fresh = manager.create_short_url("https://new.com", validity=10)
    codes = {e.shortcode for e in manager.list_all()}
    assert codes == {old.shortcode, fresh.shortcode}


# -------------------------
# Redirect
# -------------------------

def test_redirect_records_clicks_in_order(manager, clock):
    code = manager.create_short_url("https://example.com", validity=10).shortcode
    referrers = ["https://a.example/", None, "https://b.example/"]
    for ref in referrers:
        clock.advance(seconds=1)
        assert manager.resolve_redirect(code, referrer=ref).original_url == "https://example.com"

    clicks = manager.get_stats(code).clicks
    assert [c.referrer for c in clicks] == ["https://a.example/", "Direct", "https://b.example/"]
    assert [c.timestamp for c in clicks] == sorted(c.timestamp for c in clicks)
    assert manager.get_stats(code).total_clicks == 3


def test_redirect_unknown(manager):
    with pytest.raises(NotFound):
        manager.resolve_redirect("unknown")


def test_redirect_exactly_at_expiry_is_allowed(manager, clock):
    entry = manager.create_short_url("https://example.com", validity=10)
    clock.now = entry.expiry_date
    manager.resolve_redirect(entry.shortcode)
    assert entry.total_clicks == 1


def test_redirect_past_expiry_is_gone_and_not_recorded(manager, clock):
    entry = manager.create_short_url("https://example.com", validity=10)
    clock.now = entry.expiry_date + timedelta(milliseconds=1)
    with pytest.raises(Gone, match="Link has expired"):
        manager.resolve_redirect(entry.shortcode)
    assert entry.total_clicks == 0
    # expired entries stay in the store
    assert manager.get_stats(entry.shortcode) is entry
