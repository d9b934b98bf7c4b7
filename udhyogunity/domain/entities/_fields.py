"""Field readers shared by entity from_document constructors."""

from typing import Any

from udhyogunity.shared.utils.numbers import is_number


def opt_str(data: dict[str, Any], *keys: str) -> str | None:
    """First non-empty string value among keys (numbers are stringified)."""
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
        if is_number(value):
            return str(value)
    return None


def opt_number(data: dict[str, Any], key: str) -> float | None:
    """Numeric field or None. Booleans and strings are not numbers here."""
    value = data.get(key)
    return float(value) if is_number(value) else None


def opt_count(data: dict[str, Any], key: str) -> int | None:
    """Non-negative integer count or None."""
    value = data.get(key)
    if not is_number(value) or value < 0:
        return None
    return int(value)
