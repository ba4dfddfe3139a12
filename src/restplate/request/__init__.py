"""Builders that turn a resolved template into request parts.

* :func:`~restplate.request.pairs.build_query` /
  :func:`~restplate.request.pairs.build_headers` -- ordered string pairs,
  dropping entries that reference missing arguments.
* :func:`~restplate.request.body.build_body` -- body substitution by shape.
* :func:`~restplate.request.ttl.resolve_ttl` -- cache hint selection.
"""

from restplate.request.body import build_body, select_body
from restplate.request.pairs import build_headers, build_pairs, build_query
from restplate.request.ttl import resolve_ttl

__all__ = [
    "build_body",
    "build_headers",
    "build_pairs",
    "build_query",
    "resolve_ttl",
    "select_body",
]
