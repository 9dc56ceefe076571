"""Typed request/decode pipeline.

:class:`TypedFetch` issues a single request through a
:class:`~fetchkit.client.transport.Transport`, validates the response and
decodes the body into a caller-chosen shape. Every failure is reported
through the returned :class:`~fetchkit.client.result.DecodeResult`:

1. malformed request -- :class:`~fetchkit.exceptions.InvalidRequestError`,
   before any I/O;
2. no response -- the transport's :class:`~fetchkit.exceptions.TransportError`;
3. status outside ``[200, 300)`` --
   :class:`~fetchkit.exceptions.UnexpectedStatusError`, response attached;
4. 2xx without a body -- :class:`~fetchkit.exceptions.EmptyBodyError`;
5. body does not decode -- :class:`~fetchkit.exceptions.DecodeError`.

A result is produced exactly once per call; nothing is retried.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional, TypeVar, Union

import httpx

from fetchkit.client.handle import FetchHandle
from fetchkit.client.result import DecodeResult
from fetchkit.client.transport import Transport
from fetchkit.decoder import Decoder, JsonDecoder
from fetchkit.exceptions import (
    DecodeError,
    EmptyBodyError,
    InvalidRequestError,
    TransportError,
    UnexpectedStatusError,
)
from fetchkit.models import FetchRequest, prepare_request

T = TypeVar("T")

RequestLike = Union[str, FetchRequest]


class TypedFetch:
    """Fetch a URL and decode its body into a given shape.

    Holds no per-request state, so one instance can serve any number of
    concurrent calls.

    Args:
        transport: Collaborator performing the HTTP exchange. A
            :class:`~fetchkit.client.cached_fetch.CachedFetch` works here
            too, adding cache fallback underneath decoding.
        decoder: Body decoder; defaults to :class:`~fetchkit.decoder.JsonDecoder`.

    Example::

        fetch = TypedFetch(transport)
        result = await fetch.request("https://jsonplaceholder.typicode.com/users/1", User)
        if result.ok:
            print(result.value.name)
    """

    def __init__(self, transport: Transport, decoder: Optional[Decoder] = None) -> None:
        self._transport = transport
        self._decoder: Decoder = decoder or JsonDecoder()

    async def request(self, request: RequestLike, shape: type[T] | Any) -> DecodeResult[T]:
        """Perform *request* and decode the body into *shape*.

        Args:
            request: A :class:`~fetchkit.models.FetchRequest` or a bare URL.
            shape: Target type (Pydantic model, ``list[Model]``, ``dict``...).

        Returns:
            The :class:`DecodeResult`; inspect :attr:`~DecodeResult.ok`.
        """
        try:
            req = prepare_request(request)
        except InvalidRequestError as exc:
            return DecodeResult.failure(exc)

        try:
            response = await self._transport.perform(req)
        except TransportError as exc:
            return DecodeResult.failure(exc)

        return self.decode_response(response, shape)

    def decode_response(self, response: httpx.Response, shape: type[T] | Any) -> DecodeResult[T]:
        """Validate status and body of an already received *response* and decode it."""
        if not (200 <= response.status_code < 300):
            return DecodeResult.failure(
                UnexpectedStatusError(response.status_code, response), response
            )

        if not response.content:
            return DecodeResult.failure(EmptyBodyError(response=response), response)

        try:
            value = self._decoder.decode(response.content, shape)
        except DecodeError as exc:
            exc.response = response
            return DecodeResult.failure(exc, response)
        return DecodeResult.success(value, response)

    async def fetch(self, request: RequestLike, shape: type[T] | Any) -> T:
        """Like :meth:`request` but return the value or raise the error."""
        result = await self.request(request, shape)
        return result.unwrap()

    def submit(
        self,
        request: RequestLike,
        shape: type[T] | Any,
        callback: Callable[[DecodeResult[T]], Any],
    ) -> FetchHandle[DecodeResult[T]]:
        """Schedule :meth:`request` on the running loop and report to *callback*.

        The callback receives the :class:`DecodeResult` at most once; after
        :meth:`FetchHandle.cancel` it is never called.

        Raises:
            RuntimeError: If no event loop is running.
        """
        loop = asyncio.get_running_loop()
        task = loop.create_task(self.request(request, shape))
        return FetchHandle(task, callback)
