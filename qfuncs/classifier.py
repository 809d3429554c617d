"""Classify and display values returned from the sandbox."""

import math
from collections.abc import Mapping
from typing import Any

from qfuncs.models import TypeTag

# Floats from this magnitude on are displayed in exponent form.
_EXPONENT_THRESHOLD = 1e21


def classify_value(value: Any) -> TypeTag:
    """Map a returned value to a type tag.

    Long, Host and Port are never produced: at runtime they are plain
    numbers and strings, so they can only be declared by the author.
    """
    if isinstance(value, bool):
        return TypeTag.BOOLEAN
    if isinstance(value, (int, float)):
        return TypeTag.NUMBER
    if isinstance(value, str):
        return TypeTag.STRING
    return TypeTag.UNKNOWN


def display_value(value: Any) -> str:
    """Format a value for comparison of expected and actual results.

    Expected values from configuration files and results from the sandbox
    go through the same formatting, so e.g. 3 and 3.0 compare equal.
    """
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _display_float(value)
    if isinstance(value, Mapping):
        items = " ".join(
            f"{k}:{display_value(value[k])}" for k in sorted(value, key=str)
        )
        return f"map[{items}]"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(display_value(v) for v in value) + "]"
    return str(value)


def _display_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer() and abs(value) < _EXPONENT_THRESHOLD:
        return str(int(value))
    return repr(value)
