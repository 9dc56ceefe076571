"""Structured body decoding.

A decoder turns response bytes into a value of a caller-chosen *shape*. The
default :class:`JsonDecoder` delegates to Pydantic's
:class:`~pydantic.TypeAdapter`, so any type Pydantic understands works as a
shape::

    decoder = JsonDecoder()
    user = decoder.decode(b'{"id": 1, "name": "Phil"}', User)
    users = decoder.decode(body, list[User])
    raw = decoder.decode(body, dict[str, Any])

Both malformed JSON and a payload that does not fit the shape surface as
:class:`~fetchkit.exceptions.DecodeError` with the Pydantic error chained.
Decoders know nothing about HTTP.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError

from fetchkit.exceptions import DecodeError

T = TypeVar("T")


class Decoder(Protocol):
    """Anything that can turn bytes into a value of a given shape."""

    def decode(self, content: bytes, shape: Any) -> Any:
        """Decode *content* into *shape*, raising :class:`DecodeError` on failure."""
        ...


@lru_cache(maxsize=256)
def _adapter_for(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


class JsonDecoder:
    """JSON decoder validating against a Pydantic-compatible shape.

    Args:
        strict: Forwarded to Pydantic; when ``True`` no type coercion is
            performed (``"1"`` does not become ``1``). ``None`` defers to the
            shape's own configuration.
    """

    def __init__(self, strict: bool | None = None) -> None:
        self._strict = strict

    def decode(self, content: bytes, shape: type[T] | Any) -> T:
        try:
            adapter = _adapter_for(shape)
        except TypeError:
            # Unhashable shape; build an adapter without memoising it.
            adapter = TypeAdapter(shape)
        try:
            return adapter.validate_json(content, strict=self._strict)
        except ValidationError as exc:
            raise DecodeError(
                f"Could not decode body as {_shape_name(shape)}: "
                f"{exc.error_count()} validation error(s)",
                cause=exc,
            ) from exc


def _shape_name(shape: Any) -> str:
    return getattr(shape, "__name__", None) or repr(shape)
