"""HTTP fetch pipeline for fetchkit.

Classes:
    :class:`HttpxTransport` -- one HTTP exchange per call over
    :class:`httpx.AsyncClient`, feeding the response cache.
    :class:`TypedFetch` -- request, status check, empty-body check and
    structured decode, reported through a :class:`DecodeResult`.
    :class:`CachedFetch` -- raw responses with fallback to the last stored
    response when the transport fails.
    :class:`FetchHandle` -- callback delivery with cancellation.

Example::

    from fetchkit.client import CachedFetch, HttpxTransport, TypedFetch

    async with HttpxTransport(cache=cache) as transport:
        fetch = TypedFetch(CachedFetch(transport))
        user = await fetch.fetch("https://jsonplaceholder.typicode.com/users/1", User)
"""

from fetchkit.client.cached_fetch import CachedFetch
from fetchkit.client.handle import FetchHandle
from fetchkit.client.result import DecodeResult
from fetchkit.client.transport import HttpxTransport, Transport
from fetchkit.client.typed_fetch import TypedFetch

__all__ = [
    "CachedFetch",
    "DecodeResult",
    "FetchHandle",
    "HttpxTransport",
    "Transport",
    "TypedFetch",
]
