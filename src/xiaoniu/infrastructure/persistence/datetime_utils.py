"""Datetime utilities for persistence layer."""

from datetime import datetime, timezone


def normalize_to_utc(dt: datetime) -> datetime:
    """Ensure datetime is UTC and timezone-aware.

    Older snapshots may carry timestamps without an offset. This function:
    - Adds UTC timezone to naive datetimes (treating them as UTC).
    - Converts timezone-aware datetimes to UTC.

    Args:
        dt: datetime to process

    Returns:
        timezone-aware datetime in UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: object) -> datetime:
    """Parse an ISO-8601 snapshot timestamp.

    Missing or unparsable values become the Unix epoch so a single bad
    field does not discard the whole snapshot.

    Args:
        value: Raw value from a snapshot.

    Returns:
        timezone-aware datetime in UTC
    """
    if isinstance(value, str):
        try:
            return normalize_to_utc(datetime.fromisoformat(value))
        except ValueError:
            pass
    return datetime.fromtimestamp(0, tz=timezone.utc)
