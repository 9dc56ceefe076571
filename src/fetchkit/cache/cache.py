"""Disk-based HTTP response store.

Uses :mod:`diskcache` to persist the last successful response for each
canonical request. The store is owned by the transport: the transport offers
every response it receives, :mod:`fetchkit.cache.policy` decides whether it
is kept, and :class:`~fetchkit.client.cached_fetch.CachedFetch` reads entries
back when the network fails.

Keys are :meth:`FetchRequest.canonical_key` digests (method, URL with sorted
query parameters, cache-relevant headers), so the same request always lands
on the same entry regardless of parameter ordering or header case.

See Also:
    :class:`~fetchkit.models.CacheConfig` -- ``enabled``, ``ttl_seconds``
    and ``serve_fresh``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import diskcache
import httpx

from fetchkit.cache.policy import is_storable
from fetchkit.models import FROM_CACHE_EXTENSION, CacheConfig, CacheEntry, FetchRequest


class ResponseCache:
    """Disk-backed store of :class:`~fetchkit.models.CacheEntry` objects.

    Each stored response overwrites the previous entry for its request.
    Entries are evicted from disk ``ttl_seconds`` after they were written;
    HTTP freshness is tracked separately (see :mod:`fetchkit.cache.policy`).

    Args:
        cache_dir: Root directory for the cache. A ``responses/``
            subdirectory is created inside it.
        config: Cache configuration.

    Example::

        from fetchkit.cache import ResponseCache
        from fetchkit.models import CacheConfig

        cache = ResponseCache("/tmp/fetchkit-cache", CacheConfig())
        cache.store(request, response)
        entry = cache.get(request)
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._cache: Optional[diskcache.Cache] = None
        self._cache_dir = Path(cache_dir)
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "responses"))

    @property
    def config(self) -> CacheConfig:
        """The configuration this cache was created with."""
        return self._config

    def get(self, request: FetchRequest) -> Optional[CacheEntry]:
        """Return the stored entry for *request*, fresh or not, or ``None``."""
        if self._cache is None:
            return None
        data = self._cache.get(request.canonical_key())
        if data is None:
            return None
        return CacheEntry.model_validate(data)

    def store(self, request: FetchRequest, response: httpx.Response) -> bool:
        """Store *response* for *request* if the caching rules allow it.

        Responses that were themselves served from the cache are never
        written back. The response body must already be read.

        Returns:
            ``True`` if an entry was written.
        """
        if self._cache is None:
            return False
        if response.extensions.get(FROM_CACHE_EXTENSION):
            return False
        if not is_storable(request, response):
            return False
        entry = CacheEntry.from_response(request, response)
        self._cache.set(entry.key, entry.model_dump(), expire=self._config.ttl_seconds)
        return True

    def invalidate(self, request: FetchRequest) -> None:
        """Remove the entry stored for *request*, if any."""
        if self._cache is None:
            return
        self._cache.delete(request.canonical_key())

    def clear(self) -> int:
        """Remove all entries from the cache and return how many were removed."""
        if self._cache is None:
            return 0
        return self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``enabled`` (bool), and when enabled:
            ``size`` (number of entries), ``directory`` (str path),
            ``ttl_seconds`` (int) and ``serve_fresh`` (bool).
        """
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._cache_dir / "responses"),
            "ttl_seconds": self._config.ttl_seconds,
            "serve_fresh": self._config.serve_fresh,
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()


def is_from_cache(response: httpx.Response) -> bool:
    """Return whether *response* was served from the cache rather than the network."""
    return bool(response.extensions.get(FROM_CACHE_EXTENSION, False))
