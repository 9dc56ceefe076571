"""JSONPlaceholder (https://jsonplaceholder.typicode.com) user repository.

Wire models mirror the service's JSON; :class:`JsonPlaceholderUserRepository`
maps them to :class:`~fetchkit.repository.base.DomainUser`. Writes follow the
service's REST conventions (``POST /users``, ``PUT /users/{id}``,
``DELETE /users/{id}``); the service fakes them, answering as if they
succeeded.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fetchkit.client.typed_fetch import TypedFetch
from fetchkit.exceptions import RepositoryError
from fetchkit.models import FetchRequest, HTTPMethod
from fetchkit.repository.base import DomainUser, unwrap_or_not_found

DEFAULT_BASE_URL = "https://jsonplaceholder.typicode.com"


class Geo(BaseModel):
    lat: str
    lng: str


class Address(BaseModel):
    street: str
    suite: str
    city: str
    zipcode: str
    geo: Geo


class Company(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    catch_phrase: str = Field(alias="catchPhrase")
    bs: str


class User(BaseModel):
    """A ``/users`` item."""

    id: int
    name: str
    username: str
    email: str
    address: Address
    phone: str
    website: str
    company: Company


class Post(BaseModel):
    """A ``/posts`` item."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    id: int
    title: str
    body: str


class _Created(BaseModel):
    id: int


def to_domain(user: User) -> DomainUser:
    return DomainUser(
        id=user.id,
        name=user.name,
        street=user.address.street,
        city=user.address.city,
        postcode=user.address.zipcode,
        latitude=user.address.geo.lat,
        longitude=user.address.geo.lng,
    )


def to_payload(user: DomainUser) -> dict[str, Any]:
    return {
        "name": user.name,
        "address": {
            "street": user.street,
            "city": user.city,
            "zipcode": user.postcode,
            "geo": {"lat": user.latitude, "lng": user.longitude},
        },
    }


class JsonPlaceholderUserRepository:
    """:class:`~fetchkit.repository.base.Repository` of users backed by JSONPlaceholder.

    Args:
        fetcher: The typed fetch pipeline to use.
        base_url: Service root; override to point at a mirror or a test server.
    """

    def __init__(self, fetcher: TypedFetch, base_url: str = DEFAULT_BASE_URL) -> None:
        self._fetcher = fetcher
        self._base_url = base_url.rstrip("/")

    async def get(self, id: int) -> DomainUser:
        result = await self._fetcher.request(f"{self._base_url}/users/{id}", User)
        return to_domain(unwrap_or_not_found(result, f"User {id}"))

    async def list(self) -> list[DomainUser]:
        result = await self._fetcher.request(f"{self._base_url}/users", list[User])
        return [to_domain(user) for user in result.unwrap()]

    async def add(self, item: DomainUser) -> DomainUser:
        request = FetchRequest.with_json(HTTPMethod.POST, f"{self._base_url}/users", to_payload(item))
        created = (await self._fetcher.request(request, _Created)).unwrap()
        return item.model_copy(update={"id": created.id})

    async def edit(self, item: DomainUser) -> DomainUser:
        user_id = self._require_id(item)
        request = FetchRequest.with_json(
            HTTPMethod.PUT, f"{self._base_url}/users/{user_id}", to_payload(item)
        )
        unwrap_or_not_found(await self._fetcher.request(request, dict[str, Any]), f"User {user_id}")
        return item

    async def delete(self, item: DomainUser) -> None:
        user_id = self._require_id(item)
        request = FetchRequest(method=HTTPMethod.DELETE, url=f"{self._base_url}/users/{user_id}")
        unwrap_or_not_found(await self._fetcher.request(request, dict[str, Any]), f"User {user_id}")

    async def posts(self, user_id: int) -> list[Post]:
        """Posts written by *user_id*."""
        request = FetchRequest(url=f"{self._base_url}/posts", params={"userId": str(user_id)})
        return (await self._fetcher.request(request, list[Post])).unwrap()

    @staticmethod
    def _require_id(item: DomainUser) -> int:
        if item.id is None:
            raise RepositoryError("User has no id; add it before editing or deleting")
        return item.id
