"""Disk-based caching of fetched documents for specfront.

This package provides :class:`FetchCache`, an opt-in caching layer that
stores the bytes of successfully fetched URL documents on disk using
:mod:`diskcache`, so that repeated compilations against the same remote
API description do not refetch it within the configured TTL.

The cache is consulted by :class:`~specfront.document.resolver.ReferenceResolver`
and is controlled by the ``cache`` section of the global configuration
(:class:`~specfront.models.CacheConfig`).
"""

from specfront.cache.fetch_cache import FetchCache

__all__ = ["FetchCache"]
