"""Pretty-print JSON text with browser-style number formatting.

Integral floats print without a fraction (``1.0`` and ``1e2`` become ``1`` and
``100``), overflowing numbers become ``null``, and the non-standard ``NaN`` and
``Infinity`` literals are rejected.

Examples
--------
>>> print(format_json('{"n": 1e2, "r": 0.5}'))
{
  "n": 100,
  "r": 0.5
}
>>> format_json("NaN") is None
True
"""

from __future__ import annotations

import json
import math

_EXPONENT_THRESHOLD = 1e21


def _parse_number(text: str) -> int | float | None:
    value = float(text)
    if not math.isfinite(value):
        return None
    if value.is_integer() and abs(value) < _EXPONENT_THRESHOLD:
        return int(value)
    return value


def _reject_constant(name: str) -> object:
    msg = f"Unsupported JSON constant: {name}"
    raise ValueError(msg)


def format_json(text: str) -> str | None:
    """Return ``text`` re-indented by two spaces, or ``None`` if it is not JSON."""
    try:
        value = json.loads(
            text, parse_float=_parse_number, parse_constant=_reject_constant
        )
    except ValueError:
        return None
    return json.dumps(value, indent=2, ensure_ascii=False)


__all__ = ["format_json"]
