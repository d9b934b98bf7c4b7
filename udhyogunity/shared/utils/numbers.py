"""Numeric coercion for loosely-typed document fields."""

import math
from typing import Any


def parse_amount(value: Any) -> float:
    """Parse a monetary field the way the web client did (parseFloat semantics).

    Numbers pass through; strings are parsed after stripping whitespace,
    keeping the longest numeric prefix ("120.5 INR" gives 120.5). Booleans,
    None, NaN and anything unparseable contribute 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if not isinstance(value, str):
        return 0.0
    text = value.strip()
    end = 0
    seen_digit = seen_dot = False
    for i, ch in enumerate(text):
        if ch.isdigit():
            seen_digit = True
            end = i + 1
        elif ch == "." and not seen_dot:
            seen_dot = True
        elif ch in "+-" and i == 0:
            continue
        else:
            break
    if not seen_digit:
        return 0.0
    try:
        parsed = float(text[:end])
    except ValueError:
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def is_number(value: Any) -> bool:
    """Return True for int/float values (booleans excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)
