"""Transport layer -- one HTTP exchange per call, plus the response cache.

:class:`HttpxTransport` is the collaborator the fetch components talk to. It
owns an :class:`httpx.AsyncClient` (connection pooling, TLS, redirects and
timeouts from :class:`~fetchkit.models.RequestConfig`) and, optionally, a
:class:`~fetchkit.cache.ResponseCache` that it feeds after every response.

Any :class:`httpx.RequestError` -- connect, timeout, read, protocol or
redirect failures -- is re-raised as
:class:`~fetchkit.exceptions.TransportError` with the original exception
chained. HTTP error statuses are *not* errors at this layer; they come back
as ordinary responses.

See Also:
    :class:`~fetchkit.client.cached_fetch.CachedFetch`, which implements the
    same :class:`Transport` protocol on top of another transport.
"""

from __future__ import annotations

from typing import Optional, Protocol

import httpx

from fetchkit.cache import ResponseCache
from fetchkit.cache.policy import is_fresh
from fetchkit.exceptions import TransportError
from fetchkit.models import FetchRequest, RequestConfig
from fetchkit.output import get_output


class Transport(Protocol):
    """What the fetch components need from a transport."""

    async def perform(self, request: FetchRequest) -> httpx.Response:
        """Send *request* once and return the response with its body read.

        Raises:
            TransportError: If no HTTP response was obtained.
        """
        ...

    def cached_response(self, request: FetchRequest) -> Optional[httpx.Response]:
        """Return the stored response for *request*, or ``None``."""
        ...


class HttpxTransport:
    """:class:`Transport` backed by :class:`httpx.AsyncClient`.

    Can be used as an async context manager, or lazily: the client is
    created on the first request and released by :meth:`aclose`. A client
    passed in by the caller is used as-is and never closed here.

    Args:
        config: Timeout, SSL verification and redirect settings.
        cache: Optional response store fed after each response.
        client: Optional pre-built client, used as-is.
        http_transport: Optional low-level transport for the client this
            object creates (e.g. :class:`httpx.MockTransport` in tests).

    Example::

        async with HttpxTransport(cache=cache) as transport:
            response = await transport.perform(FetchRequest(url=url))
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        cache: Optional[ResponseCache] = None,
        client: Optional[httpx.AsyncClient] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._cache = cache
        self._client = client
        self._http_transport = http_transport
        self._owns_client = client is None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpxTransport:
        self._ensure_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def cache(self) -> Optional[ResponseCache]:
        return self._cache

    # ------------------------------------------------------------------ #
    # Transport protocol
    # ------------------------------------------------------------------ #

    async def perform(self, request: FetchRequest) -> httpx.Response:
        """Send *request* and return the response, body included.

        When the cache is configured with ``serve_fresh`` and holds a fresh
        entry for the request, that entry is returned without network I/O.

        Raises:
            TransportError: On any network-level failure.
        """
        output = get_output()

        if self._cache is not None and self._cache.config.serve_fresh:
            entry = self._cache.get(request)
            if entry is not None and is_fresh(entry):
                output.debug(f"Fresh cache hit: {request.method.value} {request.url}")
                return entry.to_response(request)

        client = self._ensure_client()
        http_request = client.build_request(
            request.method.value,
            request.url,
            params=request.params or None,
            headers=request.headers,
            content=request.body,
        )
        output.debug(f"{request.method.value} {http_request.url}")

        try:
            response = await client.send(http_request)
        except httpx.RequestError as exc:
            raise TransportError(
                f"{type(exc).__name__} during {request.method.value} {request.url}: {exc}",
                cause=exc,
            ) from exc

        output.debug(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())
        if self._cache is not None and self._cache.store(request, response):
            output.debug(f"Stored response for {request.method.value} {request.url}")
        return response

    def cached_response(self, request: FetchRequest) -> Optional[httpx.Response]:
        """Return the last stored response for *request*, fresh or stale."""
        if self._cache is None:
            return None
        entry = self._cache.get(request)
        if entry is None:
            return None
        return entry.to_response(request)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
                follow_redirects=self._config.follow_redirects,
                transport=self._http_transport,
            )
            self._owns_client = True
        return self._client
