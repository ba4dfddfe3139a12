"""Config commands -- read and change the user's global settings.

``restplate config`` edits :class:`~restplate.models.GlobalConfig`: the
endpoints directory plus the ``output``, ``cache`` and ``request``
sections.  Keys use dot notation (``cache.ttl_seconds``).
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from restplate.config import get_config_dir, load_global_config, resolve_config, save_global_config
from restplate.exceptions import InvalidUsageError, RestplateError
from restplate.models import GlobalConfig
from restplate.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)

_TRUE_WORDS = ("true", "1", "yes", "on")


@config_app.command("show")
def config_show(
    effective: bool = typer.Option(
        False,
        "--effective",
        help="Apply ./restplate.json and RESTPLATE_* variables before printing.",
    ),
) -> None:
    """Print the stored (or effective) configuration.

    Example::

        restplate config show --effective --json
    """
    try:
        config = resolve_config() if effective else load_global_config()
    except RestplateError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Dotted key, e.g. 'request.base_url'."),
    value: str = typer.Argument(help="New value."),
) -> None:
    """Change one setting and save it.

    The value takes the type of the setting it replaces; the whole
    configuration is validated before anything is written.

    Example::

        restplate config set request.base_url https://api.example.com
        restplate config set cache.ttl_seconds 60
    """
    try:
        updated, stored = _assign(load_global_config(), key, value)
    except RestplateError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    save_global_config(updated)
    success(f"{key} = {stored}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Do not ask for confirmation."),
) -> None:
    """Restore every setting to its default."""
    if not force and not typer.confirm("Discard all stored settings?"):
        info("Nothing changed.")
        raise typer.Exit()
    save_global_config(GlobalConfig())
    success("Settings restored to defaults.")


def _assign(config: GlobalConfig, key: str, raw: str) -> tuple[GlobalConfig, Any]:
    """Return a validated copy of *config* with *key* set from *raw*.

    Raises:
        InvalidUsageError: If the key does not exist or the value does not
            fit the setting.
    """
    data = config.model_dump(mode="json")
    *parents, leaf = key.split(".")
    section = data
    for part in parents:
        section = section.get(part)
        if not isinstance(section, dict):
            raise InvalidUsageError(f"Not a config section: {part!r} in {key}")
    if leaf not in section:
        raise InvalidUsageError(f"Unknown config key: {key}")

    section[leaf] = _coerce(section[leaf], raw, key)
    try:
        return GlobalConfig.model_validate(data), section[leaf]
    except ValidationError as exc:
        raise InvalidUsageError(f"Rejected value for {key}: {exc}") from exc


def _coerce(current: Any, raw: str, key: str) -> Any:
    if isinstance(current, bool):
        return raw.lower() in _TRUE_WORDS
    if isinstance(current, int):
        try:
            return int(raw)
        except ValueError:
            raise InvalidUsageError(f"{key} expects an integer, got {raw!r}") from None
    return raw
