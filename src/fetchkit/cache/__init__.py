"""Disk-based response caching for fetchkit.

This package provides :class:`ResponseCache`, the store that keeps the last
successful response for each canonical request using :mod:`diskcache`, and
:mod:`fetchkit.cache.policy`, the HTTP rules deciding what may be stored and
for how long it stays fresh.

The cache is owned by :class:`~fetchkit.client.transport.HttpxTransport` and
read back by :class:`~fetchkit.client.cached_fetch.CachedFetch` when a
request fails at the transport level.
"""

from fetchkit.cache.cache import ResponseCache, is_from_cache

__all__ = ["ResponseCache", "is_from_cache"]
