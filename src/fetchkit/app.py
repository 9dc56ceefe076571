"""Typer application and CLI entry point for fetchkit.

The command line is a thin demo shell around the library: ``get`` fetches and
decodes a URL, ``user`` goes through a repository, and ``cache`` / ``config``
manage local state.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. It registers sub-commands and runs the Typer app.
:class:`~fetchkit.exceptions.FetchError` escaping a command exits with the
error's ``exit_code``; anything else is written to a crash log under the data
directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from fetchkit import __version__
from fetchkit.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="fetchkit",
    help="Fetch JSON over HTTP, decode it into typed models, fall back to the cache offline.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"fetchkit {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmations."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~fetchkit.output.OutputManager` and stores
    shared options in ``ctx.obj``. ``--json`` / ``--plain`` win over the
    ``output.format`` setting.
    """
    from fetchkit.config import resolve_config
    from fetchkit.exceptions import ConfigError
    from fetchkit.output import OutputFormat, OutputManager, set_output

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    try:
        fmt = OutputFormat(resolve_config(cli_format=cli_format).output.format)
    except ConfigError:
        # Commands that read the config report the error; ``config reset`` must still run.
        fmt = OutputFormat(cli_format or OutputFormat.AUTO.value)

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


_registered = False


def register_commands() -> None:
    """Attach the built-in sub-commands to :data:`app` (idempotent)."""
    global _registered
    if _registered:
        return
    from fetchkit.commands.cache import cache_app
    from fetchkit.commands.config import config_app
    from fetchkit.commands.fetch import get_command, user_command

    app.command("get")(get_command)
    app.command("user")(user_command)
    app.add_typer(cache_app, name="cache", help="Inspect or clear stored responses.")
    app.add_typer(config_app, name="config", help="Configuration management.")
    _registered = True


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to the data directory and return its path."""
    from fetchkit.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``fetchkit`` console script."""
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from fetchkit.exceptions import FetchError
        from fetchkit.output import error

        if isinstance(exc, FetchError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
