"""Load endpoint definitions from JSON or YAML files.

A definition file is one :class:`~restplate.models.EndpointDefinition`::

    # users.yaml
    name: users
    method: GET
    url: https://api.example.com/users/$id
    default_args:
      fields: id,name
    params:
      fields: $fields
      page: $page
    headers:
      Authorization: Bearer $token
    cache_time: 60

The two public entry points are:

* :func:`load_endpoint` -- load by file path, or by name from the
  endpoints directory.
* :func:`list_endpoints` -- names available in the endpoints directory.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from restplate.exceptions import DefinitionError
from restplate.models import EndpointDefinition

_SUFFIXES = (".yaml", ".yml", ".json")


def load_endpoint(source: str, endpoints_dir: Optional[Path] = None) -> EndpointDefinition:
    """Load an endpoint definition.

    Args:
        source: A path to a ``.json``/``.yaml``/``.yml`` file, or the name
            of a definition in *endpoints_dir*.
        endpoints_dir: Directory searched when *source* is not a file.

    Returns:
        The validated definition.  A missing ``name`` defaults to the
        file stem.

    Raises:
        DefinitionError: If nothing matches *source*, or the file cannot be
            read, parsed, or validated.
    """
    path = _find_definition(source, endpoints_dir)
    data = _load_from_file(path)
    data.setdefault("name", path.stem)
    try:
        return EndpointDefinition.model_validate(data)
    except ValidationError as exc:
        raise DefinitionError(f"Invalid endpoint definition {path}: {exc}") from exc


def list_endpoints(endpoints_dir: Path) -> list[str]:
    """Return the endpoint names found in *endpoints_dir*, sorted."""
    if not endpoints_dir.is_dir():
        return []
    return sorted(
        {p.stem for p in endpoints_dir.iterdir() if p.is_file() and p.suffix.lower() in _SUFFIXES}
    )


def _find_definition(source: str, endpoints_dir: Optional[Path]) -> Path:
    path = Path(source).expanduser()
    if path.is_file():
        return path
    if endpoints_dir is not None:
        for suffix in _SUFFIXES:
            candidate = endpoints_dir / f"{source}{suffix}"
            if candidate.is_file():
                return candidate
    raise DefinitionError(f"Endpoint definition not found: {source}")


def _load_from_file(path: Path) -> dict[str, Any]:
    """Read a definition file and parse it according to its extension.

    Raises:
        DefinitionError: If the file cannot be read or is empty.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DefinitionError(f"Failed to read endpoint definition {path}: {exc}") from exc

    if not content.strip():
        raise DefinitionError(f"Endpoint definition is empty: {path}")

    suffix = path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON or YAML.

    JSON is tried first unless *hint* is ``"yaml"``; an explicit ``"json"``
    hint disables the YAML fallback.

    Raises:
        DefinitionError: If the content parses as neither, or is not a
            mapping.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            return _require_mapping(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise DefinitionError(f"Invalid JSON: {exc}") from exc
            json_error = exc

    try:
        return _require_mapping(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        msg = "Failed to parse endpoint definition as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise DefinitionError(msg) from exc


def _require_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise DefinitionError(f"Endpoint definition must be a mapping (got {kind})")
    return result
