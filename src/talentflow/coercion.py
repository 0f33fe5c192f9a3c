"""Value coercion rules shared by the condition evaluator and validator.

Answers arrive from a browser form, so comparisons follow the browser's
stringification and number parsing rather than Python's. The rules are
spelled out here instead of relying on implicit casts.
"""

from __future__ import annotations

import math
import re
from typing import Any

_PREFIXED_INT = re.compile(r"^0[xX][0-9a-fA-F]+$|^0[oO][0-7]+$|^0[bB][01]+$")


def stringify(value: Any) -> str:
    """Render a response value the way the form layer renders it."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def format_number(value: int | float) -> str:
    if isinstance(value, bool):
        return stringify(value)
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def to_number(value: Any) -> float:
    """Coerce a response value to a float; unparsable input yields NaN."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, (list, tuple)):
        return to_number(stringify(value))
    if not isinstance(value, str):
        return math.nan

    text = value.strip()
    if not text:
        return 0.0
    if _PREFIXED_INT.match(text):
        return float(int(text, 0))
    if "_" in text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def is_truthy(value: Any) -> bool:
    """Truthiness of a scalar answer.

    ``None``, ``False``, ``""``, numeric zero and NaN are falsy. Everything
    else is truthy, including the string ``"0"`` and empty containers.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return not (value == 0 or math.isnan(value))
    return True


__all__ = ["format_number", "is_truthy", "stringify", "to_number"]
