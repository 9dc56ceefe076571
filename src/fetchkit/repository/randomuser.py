"""Random User Generator (https://randomuser.me) repository.

The service generates people on demand; a ``seed`` makes the output
repeatable, so :meth:`RandomUserRepository.get` uses the requested id as the
seed. The source is read-only.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from fetchkit.client.typed_fetch import TypedFetch
from fetchkit.exceptions import NotFoundError, RepositoryError
from fetchkit.models import FetchRequest
from fetchkit.repository.base import DomainUser

DEFAULT_BASE_URL = "https://randomuser.me/api/"


class Name(BaseModel):
    title: str
    first: str
    last: str


class Street(BaseModel):
    number: int
    name: str


class Coordinates(BaseModel):
    latitude: str
    longitude: str


class Timezone(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    offset: str
    timezone_description: str = Field(alias="description")


class Location(BaseModel):
    street: Street
    city: str
    state: str
    country: str
    # Numeric for most nationalities, alphanumeric for e.g. GB and CA.
    postcode: Union[int, str]
    coordinates: Coordinates
    timezone: Timezone


class Dob(BaseModel):
    date: str
    age: int


class Identifier(BaseModel):
    name: str
    value: Optional[str] = None


class Picture(BaseModel):
    large: str
    medium: str
    thumbnail: str


class Result(BaseModel):
    """One generated person."""

    gender: str
    name: Name
    location: Location
    email: str
    dob: Dob
    registered: Dob
    phone: str
    cell: str
    id: Identifier
    picture: Picture
    nat: str


class Info(BaseModel):
    seed: str
    results: int
    page: int
    version: str


class Users(BaseModel):
    """Envelope returned by ``/api/``."""

    results: list[Result]
    info: Info


def to_domain(user: Result, id: Optional[int] = None) -> DomainUser:
    return DomainUser(
        id=id,
        name=f"{user.name.first} {user.name.last}",
        street=user.location.street.name,
        city=user.location.city,
        postcode=str(user.location.postcode),
        latitude=user.location.coordinates.latitude,
        longitude=user.location.coordinates.longitude,
    )


class RandomUserRepository:
    """Read-only :class:`~fetchkit.repository.base.Repository` over randomuser.me.

    Args:
        fetcher: The typed fetch pipeline to use.
        base_url: API endpoint.
        page_size: Number of users returned by :meth:`list`.
    """

    def __init__(
        self,
        fetcher: TypedFetch,
        base_url: str = DEFAULT_BASE_URL,
        page_size: int = 10,
    ) -> None:
        self._fetcher = fetcher
        self._base_url = base_url
        self._page_size = page_size

    async def get(self, id: int) -> DomainUser:
        request = FetchRequest(url=self._base_url, params={"seed": str(id)})
        users = (await self._fetcher.request(request, Users)).unwrap()
        if not users.results:
            raise NotFoundError(f"User {id} not found")
        return to_domain(users.results[0], id=id)

    async def list(self) -> list[DomainUser]:
        request = FetchRequest(url=self._base_url, params={"results": str(self._page_size)})
        users = (await self._fetcher.request(request, Users)).unwrap()
        return [to_domain(user) for user in users.results]

    async def add(self, item: DomainUser) -> DomainUser:
        raise RepositoryError("randomuser.me is read-only")

    async def delete(self, item: DomainUser) -> None:
        raise RepositoryError("randomuser.me is read-only")

    async def edit(self, item: DomainUser) -> DomainUser:
        raise RepositoryError("randomuser.me is read-only")
