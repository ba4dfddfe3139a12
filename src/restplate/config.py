"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for restplate:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.restplate/`` on macOS and Windows.  See :func:`get_config_dir`,
  :func:`get_cache_dir` and :func:`get_endpoints_dir`.
* **Global config** -- a single :class:`~restplate.models.GlobalConfig`
  JSON file with output, cache and request defaults.
* **Project config** -- ``./restplate.json`` pins an endpoints directory or
  base URL for one repository.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project config and global config.

File writes use a temp-file-then-rename strategy (:func:`_atomic_write`).
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from restplate.exceptions import ConfigError
from restplate.models import GlobalConfig

_APP_NAME = "restplate"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "restplate.json"

_ENV_BASE_URL = "RESTPLATE_BASE_URL"
_ENV_NO_CACHE = "RESTPLATE_NO_CACHE"
_ENV_ENDPOINTS_DIR = "RESTPLATE_ENDPOINTS_DIR"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True on Linux and the BSDs."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, else ``$HOME/<segments>``."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    return Path.home().joinpath(*default_segments)


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/restplate/`` (default
    ``~/.config/restplate/``).  Elsewhere: ``~/.restplate/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the response cache directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CACHE_HOME/restplate/`` (default
    ``~/.cache/restplate/``).  Elsewhere: ``~/.restplate/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory used for crash logs, creating it if necessary."""
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_endpoints_dir(config: Optional[GlobalConfig] = None) -> Path:
    """Return the directory holding named endpoint definitions.

    Uses ``config.endpoints_dir`` when set, otherwise
    ``<config_dir>/endpoints/``.  The default directory is created if
    missing; an explicitly configured one is returned as is.
    """
    if config is not None and config.endpoints_dir:
        return Path(config.endpoints_dir).expanduser()
    path = get_config_dir() / "endpoints"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers never see a half-written file.

    The text goes to a sibling temp file that is fsynced and then moved
    over *path* with :func:`os.replace`.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    handle, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(handle, "w", encoding="utf-8") as stream:
            stream.write(data)
            stream.flush()
            os.fsync(stream.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


# --- Global config ---


def _global_config_file() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Read ``config.json`` from the config directory.

    A missing file yields the defaults.

    Raises:
        ConfigError: If the file is not valid JSON or does not validate.
    """
    path = _global_config_file()
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate_json(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Write *config* to ``config.json`` atomically."""
    _atomic_write(_global_config_file(), config.model_dump_json(indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./restplate.json`` if present.

    Recognised keys are ``endpoints_dir`` and ``base_url``; a relative
    ``endpoints_dir`` is resolved against the current directory.

    Raises:
        ConfigError: If the file is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Project config at {path} must be a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_base_url: Optional[str] = None,
    cli_format: Optional[str] = None,
    cli_no_cache: bool = False,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``--base-url``, ``--json``/``--plain``, ``--no-cache``)
        2. Environment (``RESTPLATE_BASE_URL``, ``RESTPLATE_NO_CACHE``,
           ``RESTPLATE_ENDPOINTS_DIR``)
        3. Project config (``./restplate.json``)
        4. User config (``~/.config/restplate/config.json``)
        5. Defaults

    Returns:
        A new :class:`~restplate.models.GlobalConfig`; nothing is saved.
    """
    config = load_global_config()

    project = load_project_config()
    if project is not None:
        if project.get("endpoints_dir"):
            config.endpoints_dir = str(Path.cwd() / project["endpoints_dir"])
        if project.get("base_url"):
            config.request.base_url = project["base_url"]

    env_endpoints = os.environ.get(_ENV_ENDPOINTS_DIR)
    if env_endpoints:
        config.endpoints_dir = env_endpoints
    env_base_url = os.environ.get(_ENV_BASE_URL)
    if env_base_url:
        config.request.base_url = env_base_url
    if os.environ.get(_ENV_NO_CACHE, "").lower() in ("1", "true", "yes"):
        config.cache.enabled = False

    if cli_base_url is not None:
        config.request.base_url = cli_base_url
    if cli_format is not None:
        config.output.format = cli_format
    if cli_no_cache:
        config.cache.enabled = False

    return config
