"""Merging of default and call-time argument records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional


def merge_args(
    default_args: Optional[Mapping[str, Any]],
    call_args: Optional[Mapping[str, Any]],
) -> dict[str, Any]:
    """Return a new record with *call_args* layered over *default_args*.

    Same-named values are replaced, never deep-merged.  Neither input is
    modified.
    """
    merged: dict[str, Any] = dict(default_args or {})
    merged.update(call_args or {})
    return merged
