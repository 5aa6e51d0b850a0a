"""
Timestamp helpers.

Records carry ISO-8601 UTC strings with millisecond precision and a ``Z``
suffix, e.g. ``2026-10-18T09:30:00.123Z``.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Format a datetime as a record timestamp. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_iso() -> str:
    return to_iso(utc_now())


def today_iso() -> str:
    """Current UTC date as ``YYYY-MM-DD``."""
    return utc_now().date().isoformat()


def parse_timestamp(value: str | datetime) -> datetime:
    """
    Parse a record timestamp into an aware datetime.

    Accepts ``datetime`` objects and ISO-8601 strings (with ``Z``, an offset,
    or no zone). Values without a zone are taken as UTC.

    Raises:
        ValueError: If the string is not ISO-8601
        TypeError: If the value is neither a string nor a datetime
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise TypeError(f"Expected an ISO-8601 string or datetime, got {type(value).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
