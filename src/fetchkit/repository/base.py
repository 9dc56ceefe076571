"""Repository abstraction over remote user sources.

A :class:`Repository` hides *where* domain objects come from. Each concrete
repository fetches its own wire format (decoded with
:class:`~fetchkit.client.typed_fetch.TypedFetch`) and maps it to the shared
:class:`DomainUser`, so callers can swap one public API for another without
touching their code.
"""

from __future__ import annotations

from typing import Optional, Protocol, TypeVar

from pydantic import BaseModel

from fetchkit.client.result import DecodeResult
from fetchkit.exceptions import NotFoundError, UnexpectedStatusError

T = TypeVar("T")
D = TypeVar("D")


class DomainUser(BaseModel):
    """Source-independent view of a user."""

    id: Optional[int] = None
    name: str
    street: str
    city: str
    postcode: str
    latitude: str
    longitude: str


class Repository(Protocol[T]):
    """CRUD-style access to items of type ``T``."""

    async def get(self, id: int) -> T:
        ...

    async def list(self) -> list[T]:
        ...

    async def add(self, item: T) -> T:
        ...

    async def delete(self, item: T) -> None:
        ...

    async def edit(self, item: T) -> T:
        ...


def unwrap_or_not_found(result: DecodeResult[D], what: str) -> D:
    """Return the decoded value, turning an HTTP 404 into :class:`NotFoundError`.

    Every other failure is raised unchanged.
    """
    if isinstance(result.error, UnexpectedStatusError) and result.error.status_code == 404:
        raise NotFoundError(f"{what} not found") from result.error
    return result.unwrap()
