"""Request body resolution.

Unlike params and headers, bodies are never filtered: a placeholder whose
argument is missing stays in the body as literal text.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from restplate.templating.engine import substitute, substitute_in_string


def select_body(template_body: Any, override: Optional[Any] = None) -> Any:
    """Pick the body source for a call.

    A per-call *override* replaces the template body entirely; the two are
    never merged.
    """
    if override is not None:
        return override
    return template_body


def build_body(source: Any, args: Mapping[str, Any]) -> Any:
    """Substitute *args* into a body source.

    * text -- placeholders replaced in the string.
    * mapping / list / tuple -- placeholders replaced in every string leaf.
    * anything else (bytes, file objects, ``None``) -- returned as is.
    """
    if isinstance(source, str):
        return substitute_in_string(source, args)
    if isinstance(source, (Mapping, list, tuple)):
        return substitute(source, args)
    return source
