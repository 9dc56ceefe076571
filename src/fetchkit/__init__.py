"""fetchkit -- Typed HTTP fetching with decode and offline cache fallback.

The library composes three layers around an :class:`httpx.AsyncClient`:

* a transport that performs requests and stores successful responses,
* :class:`~fetchkit.client.cached_fetch.CachedFetch`, which serves the last
  stored response when the network fails,
* :class:`~fetchkit.client.typed_fetch.TypedFetch`, which checks the status,
  the body and decodes JSON into a caller-chosen shape.

Typical use::

    async with HttpxTransport(cache=cache) as transport:
        fetcher = TypedFetch(CachedFetch(transport))
        user = await fetcher.fetch("https://jsonplaceholder.typicode.com/users/1", User)

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes for the CLI.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
