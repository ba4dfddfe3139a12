"""Placeholder templating for restplate endpoints.

This package holds the pure, I/O-free half of request building:

* :func:`~restplate.templating.arguments.merge_args` -- layer call-time
  arguments over an endpoint's defaults.
* :func:`~restplate.templating.engine.substitute` and
  :func:`~restplate.templating.engine.substitute_in_string` -- fill ``$name``
  placeholders in strings and nested structures.
* :func:`~restplate.templating.coercion.to_string` -- the canonical text
  form used for every substituted or emitted value.
"""

from restplate.templating.arguments import merge_args
from restplate.templating.coercion import to_json, to_string
from restplate.templating.engine import (
    PLACEHOLDER_MARKER,
    substitute,
    substitute_in_string,
)

__all__ = [
    "PLACEHOLDER_MARKER",
    "merge_args",
    "substitute",
    "substitute_in_string",
    "to_json",
    "to_string",
]
