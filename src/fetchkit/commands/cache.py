"""Cache commands -- inspect and clear stored responses.

Provides the ``fetchkit cache`` sub-command group. The store lives in the
fetchkit cache directory and is what ``get --cache-on-error`` falls back to
when the network is unreachable.
"""

from __future__ import annotations

import typer

from fetchkit.output import format_response, info, success


cache_app = typer.Typer(no_args_is_help=True)


@cache_app.command("stats")
def cache_stats() -> None:
    """Show the number of stored responses and the cache settings.

    Example::

        fetchkit cache stats
        fetchkit --json cache stats
    """
    from fetchkit.commands.fetch import open_cache
    from fetchkit.config import resolve_config

    cache = open_cache(resolve_config())
    try:
        format_response(cache.stats())
    finally:
        cache.close()


@cache_app.command("clear")
def cache_clear(ctx: typer.Context) -> None:
    """Remove every stored response.

    Asks for confirmation unless ``--force`` is active.

    Example::

        fetchkit cache clear
        fetchkit --force cache clear
    """
    from fetchkit.commands.fetch import open_cache
    from fetchkit.config import resolve_config

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Remove all stored responses?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    cache = open_cache(resolve_config())
    try:
        removed = cache.clear()
    finally:
        cache.close()
    success(f"Removed {removed} stored response(s).")
