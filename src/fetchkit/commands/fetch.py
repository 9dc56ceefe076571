"""Fetch commands -- ``fetchkit get`` and ``fetchkit user``.

Both build the full pipeline for one invocation: a
:class:`~fetchkit.cache.ResponseCache` in the cache directory, an
:class:`~fetchkit.client.transport.HttpxTransport` feeding it, a
:class:`~fetchkit.client.cached_fetch.CachedFetch` for offline fallback, and
a :class:`~fetchkit.client.typed_fetch.TypedFetch` on top.
"""

from __future__ import annotations

import asyncio
from typing import Any, NoReturn, Optional

import typer

from fetchkit.cache import ResponseCache
from fetchkit.client import CachedFetch, DecodeResult, HttpxTransport, TypedFetch
from fetchkit.client.response import extract_response_data, format_api_response
from fetchkit.exceptions import FetchError, TransportError, UnexpectedStatusError
from fetchkit.models import FetchRequest, GlobalConfig
from fetchkit.output import debug, error, format_response, suggest
from fetchkit.repository import JsonPlaceholderUserRepository, RandomUserRepository
from fetchkit.repository.jsonplaceholder import Post, User

SHAPES: dict[str, Any] = {
    "json": Any,
    "user": User,
    "users": list[User],
    "post": Post,
    "posts": list[Post],
}

SOURCES = ("jsonplaceholder", "randomuser")


def open_cache(config: GlobalConfig) -> ResponseCache:
    """Open the response store under the user's cache directory."""
    from fetchkit.config import get_cache_dir

    return ResponseCache(get_cache_dir(), config.cache)


def build_transport(config: GlobalConfig, cache: ResponseCache) -> HttpxTransport:
    """Create the transport for one command invocation."""
    return HttpxTransport(config=config.request, cache=cache)


def _parse_headers(raw: Optional[list[str]]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for item in raw or []:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            error(f"Invalid header {item!r}; expected 'Name: value'")
            raise typer.Exit(code=2)
        headers[name.strip()] = value.strip()
    return headers


def _fail(exc: FetchError) -> NoReturn:
    """Report *exc* on stderr and exit with its code."""
    error(str(exc))
    if isinstance(exc, UnexpectedStatusError) and exc.response is not None:
        body = extract_response_data(exc.response)
        if body is not None:
            debug(f"Response body: {body}")
    raise typer.Exit(code=exc.exit_code)


async def _fetch_typed(
    config: GlobalConfig,
    request: FetchRequest,
    shape: Any,
    cache_on_error: bool,
) -> DecodeResult[Any]:
    cache = open_cache(config)
    try:
        async with build_transport(config, cache) as transport:
            fetcher = TypedFetch(CachedFetch(transport, use_cache_on_error=cache_on_error))
            return await fetcher.request(request, shape)
    finally:
        cache.close()


def get_command(
    url: str = typer.Argument(help="Absolute http(s) URL to fetch."),
    shape: str = typer.Option(
        "json", "--shape", "-s", help=f"Decode target: {', '.join(SHAPES)}."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Extra request header, 'Name: value'. Repeatable."
    ),
    cache_on_error: bool = typer.Option(
        True,
        "--cache-on-error/--no-cache-on-error",
        help="Serve the last stored response if the network fails.",
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Request timeout in seconds."),
) -> None:
    """Fetch URL, decode the body into --shape and print it.

    Example::

        fetchkit get https://jsonplaceholder.typicode.com/users/1 --shape user
        fetchkit --json get https://jsonplaceholder.typicode.com/posts -s posts
    """
    from fetchkit.config import resolve_config

    if shape not in SHAPES:
        error(f"Unknown shape {shape!r}; choose one of: {', '.join(SHAPES)}")
        raise typer.Exit(code=2)

    try:
        config = resolve_config(cli_timeout=timeout)
    except FetchError as exc:
        _fail(exc)

    request = FetchRequest(url=url, headers=_parse_headers(header))
    result = asyncio.run(_fetch_typed(config, request, SHAPES[shape], cache_on_error))
    if result.error is not None:
        if not cache_on_error and isinstance(result.error, TransportError):
            suggest("Re-run with --cache-on-error to use the last stored response.")
        _fail(result.error)
    if result.response is not None:
        format_api_response(result.response, result.value)


async def _get_user(config: GlobalConfig, source: str, user_id: int, cache_on_error: bool) -> Any:
    cache = open_cache(config)
    try:
        async with build_transport(config, cache) as transport:
            fetcher = TypedFetch(CachedFetch(transport, use_cache_on_error=cache_on_error))
            if source == "randomuser":
                repository: Any = RandomUserRepository(fetcher)
            else:
                repository = JsonPlaceholderUserRepository(fetcher)
            return await repository.get(user_id)
    finally:
        cache.close()


def user_command(
    user_id: int = typer.Argument(help="User id (used as the seed for randomuser)."),
    source: str = typer.Option(
        "jsonplaceholder", "--source", help=f"User source: {', '.join(SOURCES)}."
    ),
    cache_on_error: bool = typer.Option(
        True,
        "--cache-on-error/--no-cache-on-error",
        help="Serve the last stored response if the network fails.",
    ),
) -> None:
    """Look a user up through a repository and print the domain view.

    Example::

        fetchkit user 1
        fetchkit user 42 --source randomuser
    """
    from fetchkit.config import resolve_config

    if source not in SOURCES:
        error(f"Unknown source {source!r}; choose one of: {', '.join(SOURCES)}")
        raise typer.Exit(code=2)

    try:
        config = resolve_config()
        user = asyncio.run(_get_user(config, source, user_id, cache_on_error))
    except FetchError as exc:
        _fail(exc)
    format_response(user.model_dump(mode="json"))
