"""Utility functions and helpers."""

from frontdesk.utils.datetime_utils import ensure_utc, to_api_timezone, utc_date, utc_day_start, utc_now

__all__ = [
    "ensure_utc",
    "to_api_timezone",
    "utc_date",
    "utc_day_start",
    "utc_now",
]
