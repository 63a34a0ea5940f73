"""Config commands -- view and modify global configuration.

Provides the ``honeycli config`` sub-command group for reading and updating
the user's global configuration file (:class:`~honeycli.models.GlobalConfig`).
Settings are persisted in the honeycli config directory and control the API
URL, the active profile, per-profile overrides, and request defaults.
"""

from __future__ import annotations

import typer

from honeycli.output import format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Example::

        honeycli config show
        honeycli --json config show
    """
    from honeycli.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g. 'request.timeout' or 'profiles.prod.api_url')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to match the
    existing field's type (bool, int, float, or str), and the updated config
    is validated against :class:`~honeycli.models.GlobalConfig` before
    saving. Under ``profiles`` a missing profile is created on the fly.

    Raises:
        InvalidUsageError: If the key path is invalid, the value cannot be
            coerced, or validation fails.

    Example::

        honeycli config set api_url https://api.eu1.honeycomb.io
        honeycli config set active_profile prod
        honeycli config set request.timeout 60
        honeycli config set profiles.prod.api_url https://api.eu1.honeycomb.io
    """
    from pydantic import ValidationError

    from honeycli.config import load_global_config, save_global_config
    from honeycli.exceptions import InvalidUsageError
    from honeycli.models import GlobalConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for i, k in enumerate(keys[:-1]):
        if k not in target and i == 1 and keys[0] == "profiles":
            target[k] = {}
        if k not in target or not isinstance(target[k], dict):
            raise InvalidUsageError(f"Invalid config key: {key}")
        target = target[k]

    final_key = keys[-1]
    in_profile = len(keys) == 3 and keys[0] == "profiles"
    if final_key not in target and not in_profile:
        raise InvalidUsageError(f"Unknown config key: {key}")

    current = target.get(final_key)
    if isinstance(current, bool):
        coerced: object = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            raise InvalidUsageError(f"Expected integer for {key}, got: {value}") from None
    elif isinstance(current, float):
        try:
            coerced = float(value)
        except ValueError:
            raise InvalidUsageError(f"Expected number for {key}, got: {value}") from None
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise InvalidUsageError(f"Validation error: {exc}") from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")
