"""Lenient timestamp parsing and display formatting."""

from datetime import datetime, timezone
from typing import Any, Optional

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a change timestamp. Returns an aware datetime, or None if unparseable.
    Accepts ISO-8601 strings (trailing 'Z' allowed), datetimes, and epoch milliseconds.
    Naive values are taken as UTC.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_timestamp(value: Any) -> datetime:
    """Timestamp used for ordering; unparseable or missing values sort as the epoch."""
    return parse_timestamp(value) or EPOCH


def format_timestamp(value: Any, placeholder: str = "N/A") -> str:
    """Render a timestamp in local time using the locale's date and time format."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return placeholder
    return parsed.astimezone().strftime("%x %X")
