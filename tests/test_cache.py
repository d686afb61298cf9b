"""Tests for the FetchCache module."""

from __future__ import annotations

import time

import pytest

from specfront.cache import FetchCache
from specfront.models import CacheConfig

URL = "https://example.com/api/openapi.yaml"


@pytest.fixture()
def cache(tmp_path):
    """Create an enabled FetchCache pointing at tmp_path."""
    c = FetchCache(tmp_path, CacheConfig(enabled=True, ttl_seconds=300))
    yield c
    c.close()


@pytest.fixture()
def disabled_cache(tmp_path):
    c = FetchCache(tmp_path, CacheConfig(enabled=False))
    yield c
    c.close()


# ------------------------------------------------------------------ #
# Core get/set behaviour
# ------------------------------------------------------------------ #


class TestGetSet:
    def test_set_and_get(self, cache: FetchCache) -> None:
        cache.set(URL, b"openapi: 3.0.0\n")
        assert cache.get(URL) == b"openapi: 3.0.0\n"

    def test_miss(self, cache: FetchCache) -> None:
        assert cache.get("https://example.com/other.yaml") is None

    def test_urls_are_distinct(self, cache: FetchCache) -> None:
        cache.set(URL, b"a")
        cache.set(URL + "?v=2", b"b")
        assert cache.get(URL) == b"a"
        assert cache.get(URL + "?v=2") == b"b"

    def test_persists_across_instances(self, tmp_path) -> None:
        config = CacheConfig(enabled=True)
        first = FetchCache(tmp_path, config)
        first.set(URL, b"kept")
        first.close()
        second = FetchCache(tmp_path, config)
        try:
            assert second.get(URL) == b"kept"
        finally:
            second.close()

    def test_entries_expire(self, tmp_path) -> None:
        c = FetchCache(tmp_path, CacheConfig(enabled=True, ttl_seconds=1))
        try:
            c.set(URL, b"short-lived")
            time.sleep(1.2)
            assert c.get(URL) is None
        finally:
            c.close()


# ------------------------------------------------------------------ #
# Invalidation and stats
# ------------------------------------------------------------------ #


class TestMaintenance:
    def test_invalidate(self, cache: FetchCache) -> None:
        cache.set(URL, b"x")
        cache.invalidate(URL)
        assert cache.get(URL) is None

    def test_clear(self, cache: FetchCache) -> None:
        cache.set(URL, b"x")
        cache.set(URL + "2", b"y")
        cache.clear()
        assert cache.stats()["size"] == 0

    def test_stats(self, cache: FetchCache, tmp_path) -> None:
        cache.set(URL, b"x")
        stats = cache.stats()
        assert stats["enabled"] is True
        assert stats["size"] == 1
        assert stats["ttl_seconds"] == 300
        assert stats["directory"] == str(tmp_path / "documents")


# ------------------------------------------------------------------ #
# Disabled cache
# ------------------------------------------------------------------ #


class TestDisabled:
    def test_everything_is_a_no_op(self, disabled_cache: FetchCache, tmp_path) -> None:
        assert not disabled_cache.enabled
        disabled_cache.set(URL, b"x")
        assert disabled_cache.get(URL) is None
        disabled_cache.invalidate(URL)
        disabled_cache.clear()
        assert disabled_cache.stats() == {"enabled": False}
        assert not (tmp_path / "documents").exists()
