"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone (SQLite returns naive values)
    - If aware, converts to UTC

    Use at repository/persistence boundaries to normalize datetimes.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def format_utc(dt: datetime | None) -> str | None:
    """Serialize a datetime as ISO-8601 UTC (for key-value metadata)."""
    normalized = ensure_utc(dt)
    return normalized.isoformat() if normalized is not None else None


def parse_utc(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string written by format_utc back into an aware datetime."""
    if not value:
        return None
    return ensure_utc(datetime.fromisoformat(value))
