"""Raw-response fetch with "last known good" fallback.

:class:`CachedFetch` makes exactly one transport attempt. If that attempt
fails at the transport level and fallback is enabled, the last response the
transport stored for the same canonical request is returned instead, marked
as served-from-cache. Everything else passes through untouched:

* a live response (any status, including 4xx/5xx) is returned as received;
* with fallback disabled, the :class:`~fetchkit.exceptions.TransportError`
  propagates unchanged;
* with fallback enabled but nothing stored, the *original*
  :class:`~fetchkit.exceptions.TransportError` propagates -- a cache miss is
  not a new kind of error.

This component never writes to the cache; storage is decided by the
transport's HTTP caching rules. It implements the
:class:`~fetchkit.client.transport.Transport` protocol itself, so decoding
layers on top::

    fetch = TypedFetch(CachedFetch(transport))
"""

from __future__ import annotations

from typing import Optional, Union

import httpx

from fetchkit.client.transport import Transport
from fetchkit.exceptions import TransportError
from fetchkit.models import FetchRequest, prepare_request
from fetchkit.output import get_output


class CachedFetch:
    """Fetch raw responses, substituting the cached one on transport failure.

    Args:
        transport: The underlying transport; it owns the cache store.
        use_cache_on_error: Default for :meth:`request` when the caller does
            not pass the toggle, and the setting used by :meth:`perform`.
    """

    def __init__(self, transport: Transport, use_cache_on_error: bool = True) -> None:
        self._transport = transport
        self._use_cache_on_error = use_cache_on_error

    async def request(
        self,
        request: Union[str, FetchRequest],
        use_cache_on_error: Optional[bool] = None,
    ) -> httpx.Response:
        """Perform *request* once, falling back to the cache if allowed.

        Args:
            request: A :class:`~fetchkit.models.FetchRequest` or a bare URL.
            use_cache_on_error: Override the instance default.

        Returns:
            The live response, or the stored one after a transport failure.
            Use :func:`~fetchkit.cache.is_from_cache` to tell them apart.

        Raises:
            InvalidRequestError: If *request* is malformed (no I/O happens).
            TransportError: If the transport failed and no fallback applied.
        """
        req = prepare_request(request)
        use_cache = self._use_cache_on_error if use_cache_on_error is None else use_cache_on_error

        try:
            return await self._transport.perform(req)
        except TransportError as exc:
            if not use_cache:
                raise
            cached = self._transport.cached_response(req)
            if cached is None:
                raise
            get_output().debug(
                f"Transport failed ({exc}); serving cached response for "
                f"{req.method.value} {req.url}"
            )
            return cached

    async def perform(self, request: FetchRequest) -> httpx.Response:
        """:class:`~fetchkit.client.transport.Transport` entry point using the instance default."""
        return await self.request(request)

    def cached_response(self, request: FetchRequest) -> Optional[httpx.Response]:
        """Delegate to the underlying transport's store."""
        return self._transport.cached_response(request)
