"""Config commands -- view and modify global configuration.

Provides the ``specfront config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~specfront.models.GlobalConfig`): fetch timeout, the persistent
fetch cache, extension handlers, and the default output format.
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from specfront.commands import report_errors
from specfront.exceptions import InvalidUsageError
from specfront.output import format_document, info, success

config_app = typer.Typer(no_args_is_help=True)


def _coerce(current: Any, value: str) -> Any:
    """Convert *value* to the type of the field's current value.

    List fields take a comma-separated string; ``none``/``null`` clears an
    optional field.

    Raises:
        ValueError: If *value* does not fit the field.
    """
    if isinstance(current, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(current, int):
        return int(value)
    if isinstance(current, list):
        return [item.strip() for item in value.split(",") if item.strip()]
    if value.lower() in ("none", "null"):
        return None
    return value


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Example::

        specfront config show
        specfront --json config show
    """
    from specfront.config import get_config_dir, load_global_config

    with report_errors():
        config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_document(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g., 'fetch.timeout')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The updated config is validated against
    :class:`~specfront.models.GlobalConfig` before saving.

    Example::

        specfront config set fetch.timeout 30
        specfront config set cache.enabled true
        specfront config set extensions.handlers gnostic-x-book,./lint-ext
    """
    from specfront.config import load_global_config, save_global_config
    from specfront.models import GlobalConfig

    with report_errors():
        data = load_global_config().model_dump(mode="json")

        keys = key.split(".")
        target = data
        for k in keys[:-1]:
            if k not in target or not isinstance(target[k], dict):
                raise InvalidUsageError(f"Invalid config key: {key}")
            target = target[k]

        final_key = keys[-1]
        if final_key not in target:
            raise InvalidUsageError(f"Unknown config key: {key}")

        try:
            coerced = _coerce(target[final_key], value)
        except ValueError:
            raise InvalidUsageError(f"Invalid value for {key}: {value}") from None
        target[final_key] = coerced

        try:
            new_config = GlobalConfig.model_validate(data)
        except ValidationError as exc:
            raise InvalidUsageError(f"Validation error: {exc}") from None

        save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(ctx: typer.Context) -> None:
    """Reset configuration to defaults. Asks for confirmation unless ``--force``."""
    from specfront.config import save_global_config
    from specfront.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
