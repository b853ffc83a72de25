"""Datetime utility functions."""

from datetime import UTC, date, datetime, time
from zoneinfo import ZoneInfo

from frontdesk.config import settings

# Timezone for API responses (from config)
API_TIMEZONE = ZoneInfo(settings.timezone)


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """Return ``dt`` converted to UTC. Naive datetimes are taken as UTC already."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utc_date(dt: datetime | None = None) -> date:
    """UTC calendar date of ``dt`` (defaults to now); the time of day is dropped."""
    return ensure_utc(dt if dt is not None else utc_now()).date()


def to_api_timezone(dt: datetime | None) -> datetime | None:
    """Convert a datetime to API timezone (from config).

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Datetime in API timezone, or None if input was None
    """
    if dt is None:
        return None
    return ensure_utc(dt).astimezone(API_TIMEZONE)


def utc_day_start(day: date) -> datetime:
    """Midnight UTC at the start of ``day``."""
    return datetime.combine(day, time.min, tzinfo=UTC)
