"""Config commands -- view and modify the persisted configuration.

Provides the ``fetchkit config`` sub-command group. Settings live in
``config.json`` under the fetchkit config directory and supply the defaults
for request timeouts, the response cache and the output format. Environment
variables and CLI flags still override them at run time (see
:func:`fetchkit.config.resolve_config`).
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from fetchkit.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


def _coerce(key: str, current: Any, value: str) -> Any:
    """Convert the CLI string *value* to the type of the *current* setting."""
    if isinstance(current, bool):
        lowered = value.lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
        error(f"Expected true/false for {key}, got: {value}")
        raise typer.Exit(code=2)
    if isinstance(current, (int, float)):
        kind = type(current)
        try:
            return kind(value)
        except ValueError:
            error(f"Expected {kind.__name__} for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    return value


@config_app.command("show")
def config_show() -> None:
    """Show the persisted configuration.

    Example::

        fetchkit config show
        fetchkit --json config show
    """
    from fetchkit.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g., 'cache.ttl_seconds')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the existing field (bool, int,
    float or str) and the result is validated against
    :class:`~fetchkit.models.GlobalConfig` before it is saved.

    Raises:
        typer.Exit: With code 2 if the key path is unknown, the value
            cannot be coerced, or validation fails.

    Example::

        fetchkit config set request.timeout 10
        fetchkit config set cache.enabled false
        fetchkit config set output.format json
    """
    from fetchkit.config import load_global_config, save_global_config
    from fetchkit.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    *parents, final_key = key.split(".")
    target = data
    for part in parents:
        if not isinstance(target.get(part), dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[part]

    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    coerced = _coerce(key, target[final_key], value)
    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.

    Example::

        fetchkit config reset
        fetchkit --force config reset
    """
    from fetchkit.config import save_global_config
    from fetchkit.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
