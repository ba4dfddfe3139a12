"""Canonical string forms for argument and template values.

:func:`to_string` is used wherever a value has to become text: when an
argument is inserted into a template string, and when a resolved query or
header value is emitted.  Structured values become compact JSON so that a
nested mapping placed in a string leaf, or sent as a single query value,
reads the same way everywhere.

Numbers are written the same way at every depth: ``2.0`` is ``2`` both on
its own and inside ``{"a": 2.0}``, and exponents are written without
padding (``1e-7``).

:func:`to_string` is total; no input makes it raise.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

# Integral floats at or above this magnitude keep exponent notation.
_MAX_PLAIN_INTEGER = 1e21


def to_json(value: Any) -> str:
    """Serialise *value* to compact JSON.

    Numbers use :func:`_format_number`; NaN and the infinities have no JSON
    form and become ``null``.  Non-string mapping keys are converted with
    :func:`to_string`, and objects JSON cannot represent are rendered with
    :func:`str`.

    Example::

        >>> to_json({"a": 1, "b": [True, None], "c": 2.0})
        '{"a":1,"b":[true,null],"c":2}'
    """
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if value is None or isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return "null"
        return _format_number(value)
    if isinstance(value, Mapping):
        members = (
            f"{to_json(key if isinstance(key, str) else to_string(key))}:{to_json(item)}"
            for key, item in value.items()
        )
        return "{" + ",".join(members) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(to_json(item) for item in value) + "]"
    return to_json(str(value))


def to_string(value: Any) -> str:
    """Return the canonical string form of *value*.

    * ``str`` -- returned unchanged.
    * ``bool`` / ``None`` -- ``"true"``, ``"false"``, ``"null"``.
    * ``int`` / ``float`` -- decimal text; see :func:`_format_number`.
    * mappings, lists, tuples -- compact JSON (:func:`to_json`).
    * anything else -- ``str(value)``.
    """
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, (int, float)):
        return _format_number(value)
    if isinstance(value, (Mapping, list, tuple)):
        return to_json(value)
    return str(value)


def _format_number(value: int | float) -> str:
    """Render a number the way JSON interchange text would.

    Integral floats lose their fractional part (``2.0`` -> ``"2"``).  Other
    floats use the shortest digits that round-trip, in plain notation for
    magnitudes from ``1e-6`` up to ``1e21`` and exponent notation outside
    that range (``1e-7``, ``1.5e+21``).
    """
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < _MAX_PLAIN_INTEGER:
        return str(int(value))

    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(digit) for digit in digit_tuple)
    point = len(digits) + exponent
    prefix = "-" if value < 0 else ""

    if 0 < point <= 21:
        return f"{prefix}{digits[:point]}.{digits[point:]}"
    if -6 < point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"

    power = point - 1
    mantissa = digits if len(digits) == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{prefix}{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"
