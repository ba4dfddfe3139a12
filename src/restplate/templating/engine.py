"""Placeholder substitution for strings and nested template structures.

A placeholder is a literal ``$`` followed by an argument name.  Templates
are value trees: mappings with string keys, lists or tuples, strings,
numbers, booleans and ``None``.  Substitution only ever touches string
leaves, so the shape of a template (its keys and nesting) is fixed when it
is declared and no argument value can change it.

Argument names are matched longest first, so with ``arg1`` and ``arg12``
both supplied, ``$arg12`` is filled from ``arg12``.  Every occurrence is
replaced in one pass; text inserted from an argument is not scanned again.

Example::

    >>> substitute({"q": "$term", "page": 2}, {"term": "cats"})
    {'q': 'cats', 'page': 2}
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from restplate.exceptions import TemplateParseError
from restplate.templating.coercion import to_string

PLACEHOLDER_MARKER = "$"

_SCALARS = (str, int, float, bool, type(None))


def _placeholder_pattern(names: list[str]) -> re.Pattern[str]:
    ordered = sorted(names, key=len, reverse=True)
    alternatives = "|".join(re.escape(name) for name in ordered)
    return re.compile(re.escape(PLACEHOLDER_MARKER) + f"({alternatives})")


def substitute_in_string(text: str, args: Mapping[str, Any]) -> str:
    """Replace every ``$name`` token in *text* with ``to_string(args[name])``.

    Tokens naming arguments that are absent from *args* are left as they
    are.

    Args:
        text: Template text.
        args: Argument record.

    Returns:
        The substituted text.
    """
    names = [name for name in args if name]
    if not names or PLACEHOLDER_MARKER not in text:
        return text
    pattern = _placeholder_pattern(names)
    return pattern.sub(lambda match: to_string(args[match.group(1)]), text)


def substitute(template: Any, args: Mapping[str, Any]) -> Any:
    """Substitute *args* into every string leaf of *template*.

    Mappings keep their keys and come back as plain ``dict`` objects in the
    same order; lists and tuples come back as lists.  Numbers, booleans and
    ``None`` are returned unchanged.

    Raises:
        TemplateParseError: If *template* contains a mapping key that is
            not a string, or a node that is not part of a value tree.
    """
    return _substitute_node(template, args, path="$")


def _substitute_node(node: Any, args: Mapping[str, Any], path: str) -> Any:
    if isinstance(node, str):
        return substitute_in_string(node, args)
    if isinstance(node, _SCALARS):
        return node
    if isinstance(node, Mapping):
        resolved: dict[str, Any] = {}
        for key, value in node.items():
            if not isinstance(key, str):
                raise TemplateParseError(
                    f"Template key {key!r} at {path} is not a string"
                )
            resolved[key] = _substitute_node(value, args, f"{path}.{key}")
        return resolved
    if isinstance(node, (list, tuple)):
        return [
            _substitute_node(item, args, f"{path}[{index}]")
            for index, item in enumerate(node)
        ]
    raise TemplateParseError(
        f"Template value at {path} has unsupported type {type(node).__name__}"
    )
