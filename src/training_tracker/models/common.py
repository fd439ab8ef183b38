"""Identifier and timestamp helpers shared by all records."""

from datetime import datetime, timezone
from uuid import uuid4


def new_id() -> str:
    """Generate a fresh record identifier."""
    return str(uuid4())


def now_iso() -> str:
    """Current UTC time as a sortable ISO-8601 string (millisecond precision)."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp, returning None if it is not a valid date.

    Naive values are treated as UTC so they compare against aware ones.
    """
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
