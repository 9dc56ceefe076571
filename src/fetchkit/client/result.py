"""The outcome of a typed fetch.

:class:`DecodeResult` carries either a decoded value or a
:class:`~fetchkit.exceptions.FetchError`, never both, plus the
:class:`httpx.Response` when one was received (so a caller can still read
the body of a 404 or of a payload that failed to decode).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

import httpx

from fetchkit.exceptions import FetchError

T = TypeVar("T")


@dataclass(frozen=True)
class DecodeResult(Generic[T]):
    """Either a decoded ``value`` or an ``error``.

    Build instances through :meth:`success` and :meth:`failure`. A decoded
    value may legitimately be ``None`` (a JSON ``null`` decoded into an
    ``Optional`` shape), so :attr:`ok` looks at ``error`` only.

    Raises:
        ValueError: If both ``value`` and ``error`` are populated.
    """

    value: Optional[T] = None
    error: Optional[FetchError] = None
    response: Optional[httpx.Response] = None

    def __post_init__(self) -> None:
        if self.error is not None and self.value is not None:
            raise ValueError("DecodeResult cannot carry both a value and an error")

    @classmethod
    def success(cls, value: T, response: Optional[httpx.Response] = None) -> DecodeResult[T]:
        return cls(value=value, response=response)

    @classmethod
    def failure(cls, error: FetchError, response: Optional[httpx.Response] = None) -> DecodeResult[T]:
        return cls(error=error, response=response)

    @property
    def ok(self) -> bool:
        """``True`` when the fetch produced a value."""
        return self.error is None

    def unwrap(self) -> T:
        """Return the decoded value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
