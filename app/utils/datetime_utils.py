"""
Datetime utilities.

Provides timezone-aware datetime functions. Calendar days are UTC days.
"""

from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    """
    Get current UTC datetime with timezone info.

    Returns:
        Current datetime in UTC with timezone awareness
    """
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def start_of_day(value: datetime) -> datetime:
    """
    Get midnight UTC of the calendar day containing value.

    Args:
        value: Any datetime

    Returns:
        Start of the UTC day
    """
    value = ensure_utc(value)
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def day_bounds(value: datetime) -> tuple[datetime, datetime]:
    """Get [start, end) of the UTC day containing value."""
    start = start_of_day(value)
    return start, start + timedelta(days=1)


def whole_days_between(start: datetime, end: datetime) -> int:
    """
    Count complete 24-hour periods from start to end.

    Args:
        start: Earlier moment
        end: Later moment

    Returns:
        floor((end - start) / 1 day)
    """
    return (ensure_utc(end) - ensure_utc(start)) // timedelta(days=1)
