"""Cache time-to-live resolution."""

from __future__ import annotations

from typing import Optional


def resolve_ttl(override: Optional[int], configured_default: int) -> int:
    """Return the ttl for one call.

    A per-call *override* wins when it is given and non-zero; otherwise the
    endpoint's *configured_default* applies.  The value is a hint for the
    transport's cache and is not enforced here.
    """
    if override:
        return override
    return configured_default
