"""Uniform "something that can fetch a T" capability.

Code that only needs *a* source of users -- not a particular HTTP endpoint
-- depends on :class:`Fetchable` and is handed whichever implementation fits:
a :class:`ResourceFetch` bound to a live endpoint, or a :class:`StaticFetch`
returning a fixed value (handy in tests and demos). Python's structural
typing makes a wrapper around the concrete implementation unnecessary.

Example::

    @dataclass
    class Greeter:
        users: Fetchable[User]

        async def greet(self) -> str:
            return f"Hello {(await self.users.fetch()).name}"

    Greeter(StaticFetch(User(id=1, name="Phil")))
    Greeter(ResourceFetch(typed_fetch, "https://.../users/1", User))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar, Union

from fetchkit.client.typed_fetch import TypedFetch
from fetchkit.models import FetchRequest

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Fetchable(Protocol[T_co]):
    """Anything with an awaitable ``fetch()`` producing a ``T``."""

    async def fetch(self) -> T_co:
        ...


@dataclass(frozen=True)
class ResourceFetch(Generic[T]):
    """A request and a shape bound to a :class:`TypedFetch`.

    ``fetch()`` raises the pipeline's :class:`~fetchkit.exceptions.FetchError`
    subclasses on failure.
    """

    fetcher: TypedFetch
    request: Union[str, FetchRequest]
    shape: Any

    async def fetch(self) -> T:
        return await self.fetcher.fetch(self.request, self.shape)


@dataclass(frozen=True)
class StaticFetch(Generic[T]):
    """Always returns ``value``."""

    value: T

    async def fetch(self) -> T:
        return self.value
