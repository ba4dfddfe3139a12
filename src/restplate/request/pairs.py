"""Query-string and header assembly from templates.

Both builders follow the same rule: substitute the arguments, walk the
top-level keys in declaration order, coerce each value to text, and drop
any entry whose text still contains a ``$`` marker.  A surviving ``$``
means the entry referenced an argument that the call did not supply, so
the parameter or header is omitted rather than sent with a literal
placeholder.

Nested values are not flattened: a mapping under a key is sent as one
compact-JSON value for that key.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from restplate.exceptions import TemplateParseError
from restplate.templating.coercion import to_string
from restplate.templating.engine import PLACEHOLDER_MARKER, substitute


def build_pairs(template: Any, args: Mapping[str, Any], kind: str = "params") -> list[tuple[str, str]]:
    """Resolve *template* into ordered ``(key, value)`` string pairs.

    Args:
        template: A mapping template, or ``None`` / an empty mapping.
        args: The merged argument record.
        kind: Name of the template, used in error messages.

    Returns:
        The surviving pairs in declaration order.

    Raises:
        TemplateParseError: If *template* is not a mapping.
    """
    if template is None:
        return []
    if not isinstance(template, Mapping):
        raise TemplateParseError(
            f"The {kind} template must be a mapping, got {type(template).__name__}"
        )

    resolved = substitute(template, args)
    pairs: list[tuple[str, str]] = []
    for key, value in resolved.items():
        text = to_string(value)
        if PLACEHOLDER_MARKER in text:
            continue
        pairs.append((key, text))
    return pairs


def build_query(template: Any, args: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Resolve a params template into query-string pairs."""
    return build_pairs(template, args, kind="params")


def build_headers(template: Any, args: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Resolve a headers template into header pairs."""
    return build_pairs(template, args, kind="headers")
