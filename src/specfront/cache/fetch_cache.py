"""Disk-based cache for fetched URL documents.

Uses :mod:`diskcache` to persist the raw bytes of remote documents with a
configurable time-to-live (TTL). Only successful fetches are stored; the
resolver never writes failed responses.

Cache keys are SHA-256 hashes of the normalized URL, so two spellings of
the same URL that normalize identically share an entry.

See Also:
    :class:`~specfront.models.CacheConfig` -- the Pydantic model that
    controls ``enabled`` and ``ttl_seconds``.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Optional

import diskcache

from specfront.models import CacheConfig


class FetchCache:
    """Disk-backed cache for fetched document bytes.

    Args:
        cache_dir: Root directory for the cache. A ``documents/``
            subdirectory is created inside it.
        config: Cache configuration (``enabled`` flag and ``ttl_seconds``).

    Example::

        from specfront.cache import FetchCache
        from specfront.models import CacheConfig

        cache = FetchCache("/tmp/specfront-cache", CacheConfig(enabled=True))
        cache.set("https://example.com/openapi.yaml", b"openapi: 3.0.0\\n")
        hit = cache.get("https://example.com/openapi.yaml")
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._cache: Optional[diskcache.Cache] = None
        self._cache_dir = Path(cache_dir)
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "documents"))

    @property
    def enabled(self) -> bool:
        return self._cache is not None

    def get(self, url: str) -> Optional[bytes]:
        """Look up the cached bytes for *url*.

        Returns:
            The document bytes on a hit, or ``None`` on a miss or when
            caching is disabled.
        """
        if self._cache is None:
            return None
        return self._cache.get(self._make_key(url))

    def set(self, url: str, data: bytes) -> None:
        """Store the fetched bytes for *url*. A no-op when disabled."""
        if self._cache is None:
            return
        self._cache.set(self._make_key(url), data, expire=self._config.ttl_seconds)

    def invalidate(self, url: str) -> None:
        """Remove the entry for *url*, if any."""
        if self._cache is None:
            return
        self._cache.delete(self._make_key(url))

    def clear(self) -> None:
        """Remove all entries from the cache."""
        if self._cache is not None:
            self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled`` (bool), and when enabled:
            ``size`` (number of entries), ``directory`` (str path), and
            ``ttl_seconds`` (int).
        """
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._cache_dir / "documents"),
            "ttl_seconds": self._config.ttl_seconds,
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()

    def _make_key(self, url: str) -> str:
        return hashlib.sha256(f"GET|{url}".encode()).hexdigest()
