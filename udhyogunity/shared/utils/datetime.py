"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Documents written by older clients store dates as Firestore timestamps,
ISO strings or epoch milliseconds; parse_datetime normalizes all three.
"""

from datetime import UTC, datetime
from typing import Any


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of datetime.now() / datetime.utcnow().

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def from_timestamp_ms_utc(timestamp_ms: int | float) -> datetime:
    """
    Create a UTC-aware datetime from a millisecond Unix timestamp.
    Common in JavaScript clients (Date.now()).

    Args:
        timestamp_ms: Unix timestamp in milliseconds

    Returns:
        UTC-aware datetime
    """
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)


def parse_datetime(value: Any) -> datetime | None:
    """
    Coerce a stored date value to a UTC-aware datetime.

    Accepts datetime, ISO-8601 string (a trailing 'Z' is allowed) or epoch
    milliseconds. Anything else, including unparseable strings, gives None.

    Args:
        value: Raw field value from a document

    Returns:
        UTC-aware datetime or None
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, (int, float)):
        try:
            return from_timestamp_ms_utc(value)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value.strip():
        try:
            return ensure_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
        except ValueError:
            return None
    return None
