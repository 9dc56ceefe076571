"""Canonical Pydantic models shared across all fetchkit modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`CacheConfig`, :class:`OutputConfig`, and
    :class:`GlobalConfig`.

**Pipeline models** -- what flows through the fetch pipeline:
    :class:`HTTPMethod`, :class:`FetchRequest` (an immutable request
    descriptor), and :class:`CacheEntry` (the last successful response stored
    for a request).

All models use Pydantic v2. :class:`FetchRequest` is frozen so that a request
cannot change between the moment it is issued and the moment its cache key is
computed.
"""

from __future__ import annotations

import enum
import hashlib
import json
from datetime import datetime, timezone
from typing import Any, Literal, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field

from fetchkit.exceptions import InvalidRequestError

FROM_CACHE_EXTENSION = "fetchkit_from_cache"
"""Key set to ``True`` in ``httpx.Response.extensions`` for served-from-cache responses."""

CACHED_AT_EXTENSION = "fetchkit_cached_at"
"""Key holding the original receipt time of a served-from-cache response."""

CACHE_KEY_HEADERS = ("accept", "accept-language", "authorization")
"""Request headers that take part in the canonical request form."""

# Headers describing the wire encoding of the original body; the stored
# content is already decoded so replaying them would corrupt the response.
_WIRE_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})


# --- Configuration ---


class RequestConfig(BaseModel):
    """Transport settings applied to every request."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")


class CacheConfig(BaseModel):
    """HTTP response cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Store successful GET responses")
    ttl_seconds: int = Field(
        default=86400,
        description="How long an entry stays on disk for fallback use",
    )
    serve_fresh: bool = Field(
        default=False,
        description="Answer from the cache without network I/O while an entry is fresh",
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format used when no format flag is given"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/fetchkit/config.json``.

    Loaded and saved by :func:`~fetchkit.config.load_global_config` and
    :func:`~fetchkit.config.save_global_config`. See
    :func:`~fetchkit.config.resolve_config` for the precedence chain.
    """

    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Pipeline ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods a :class:`FetchRequest` can carry."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class FetchRequest(BaseModel):
    """Immutable description of a single HTTP request.

    A bare URL is the common case; method, headers, query parameters and a
    raw body cover the richer one. Instances are frozen once built.

    Example::

        req = FetchRequest(url="https://jsonplaceholder.typicode.com/users/1")
        post = FetchRequest.with_json(
            "POST", "https://jsonplaceholder.typicode.com/posts", {"title": "hello"}
        )
    """

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod = HTTPMethod.GET
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    params: dict[str, str] = Field(default_factory=dict)
    body: Optional[bytes] = None

    @classmethod
    def coerce(cls, value: Union[str, FetchRequest]) -> FetchRequest:
        """Return *value* unchanged, or wrap a bare URL string in a GET request."""
        if isinstance(value, FetchRequest):
            return value
        return cls(url=value)

    @classmethod
    def with_json(
        cls,
        method: Union[str, HTTPMethod],
        url: str,
        payload: Any,
        headers: Optional[dict[str, str]] = None,
    ) -> FetchRequest:
        """Build a request whose body is *payload* serialised as JSON."""
        merged = {"Content-Type": "application/json"}
        merged.update(headers or {})
        return cls(
            method=method if isinstance(method, HTTPMethod) else HTTPMethod(method.upper()),
            url=url,
            headers=merged,
            body=json.dumps(payload, default=str).encode("utf-8"),
        )

    def canonical_url(self) -> str:
        """Absolute URL with query parameters merged and sorted."""
        url = httpx.URL(self.url).copy_merge_params(self.params)
        base = f"{url.scheme}://{url.netloc.decode('ascii')}{url.path}"
        items = sorted(url.params.multi_items())
        if not items:
            return base
        return base + "?" + str(httpx.QueryParams(items))

    def canonical_key(self) -> str:
        """Cache key: SHA-256 of method, canonical URL and cache-relevant headers."""
        parts = [self.method.value, self.canonical_url()]
        lowered = {k.lower(): v for k, v in self.headers.items()}
        for name in CACHE_KEY_HEADERS:
            if name in lowered:
                parts.append(f"{name}:{lowered[name]}")
        raw = json.dumps(parts, separators=(",", ":"))
        return hashlib.sha256(raw.encode()).hexdigest()

    def to_httpx(self) -> httpx.Request:
        """Build the :class:`httpx.Request` handed to the transport."""
        return httpx.Request(
            self.method.value,
            self.url,
            params=self.params or None,
            headers=self.headers,
            content=self.body,
        )


def validate_request(request: FetchRequest) -> None:
    """Check that *request* targets an absolute ``http``/``https`` URL and
    can be put on the wire.

    Raises:
        InvalidRequestError: If the URL cannot be parsed, is relative or
            uses another scheme, or if a header cannot be encoded.
    """
    try:
        url = httpx.URL(request.url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidRequestError(f"Malformed URL {request.url!r}: {exc}") from exc
    if url.scheme not in ("http", "https"):
        raise InvalidRequestError(
            f"URL must be absolute http(s), got {request.url!r}"
        )
    if not url.host:
        raise InvalidRequestError(f"URL has no host: {request.url!r}")
    try:
        request.to_httpx()
    except (httpx.InvalidURL, UnicodeEncodeError, TypeError) as exc:
        raise InvalidRequestError(f"Request cannot be encoded: {exc}") from exc


class CacheEntry(BaseModel):
    """The most recent successful response stored for one canonical request.

    Created or overwritten on every storable response, read back only when
    the live request fails. Expiry is the cache store's job.
    """

    key: str
    method: HTTPMethod
    url: str
    status_code: int
    headers: list[tuple[str, str]] = Field(default_factory=list)
    content: bytes = b""
    received_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_response(
        cls,
        request: FetchRequest,
        response: httpx.Response,
        received_at: Optional[datetime] = None,
    ) -> CacheEntry:
        """Snapshot *response* (whose body must already be read) for *request*."""
        headers = [
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in _WIRE_HEADERS
        ]
        return cls(
            key=request.canonical_key(),
            method=request.method,
            url=request.canonical_url(),
            status_code=response.status_code,
            headers=headers,
            content=response.content,
            received_at=received_at or datetime.now(timezone.utc),
        )

    def to_response(self, request: FetchRequest) -> httpx.Response:
        """Rebuild an :class:`httpx.Response` marked as served-from-cache."""
        return httpx.Response(
            status_code=self.status_code,
            headers=self.headers,
            content=self.content,
            request=request.to_httpx(),
            extensions={
                FROM_CACHE_EXTENSION: True,
                CACHED_AT_EXTENSION: self.received_at,
            },
        )


def prepare_request(value: Union[str, FetchRequest]) -> FetchRequest:
    """Coerce *value* into a :class:`FetchRequest` and validate it.

    Raises:
        InvalidRequestError: If the descriptor cannot be built or its URL is
            not an absolute ``http``/``https`` URL.
    """
    try:
        request = FetchRequest.coerce(value)
    except ValueError as exc:
        raise InvalidRequestError(f"Invalid request descriptor: {exc}") from exc
    validate_request(request)
    return request
