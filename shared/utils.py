"""General utility functions."""

import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from urllib.parse import urlparse


def validate_url(url: str) -> bool:
    """
    Validate URL format.

    Args:
        url: URL string to validate

    Returns:
        True if valid, False otherwise
    """
    try:
        result = urlparse(url)
        return all([result.scheme, result.netloc])
    except ValueError:
        return False


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


def start_of_day_timestamp(day: date) -> int:
    """Unix seconds of local midnight at the start of ``day``."""
    return int(datetime.combine(day, time.min).timestamp())


def max_history_date(today: Optional[date] = None) -> date:
    """Latest date a historical query may ask for (yesterday)."""
    return (today or date.today()) - timedelta(days=1)


def to_local_datetime(timestamp: int, offset_seconds: int = 0) -> datetime:
    """Convert unix seconds into an aware datetime at a fixed UTC offset."""
    return datetime.fromtimestamp(timestamp, tz=timezone(timedelta(seconds=offset_seconds)))


def format_time(moment: datetime) -> str:
    """Format as ``HH:MM``."""
    return moment.strftime("%H:%M")


def format_day(moment: datetime) -> str:
    """Format as a short weekday, e.g. ``Mon``."""
    return moment.strftime("%a")


def format_date(day: date) -> str:
    """Format as ISO ``YYYY-MM-DD``."""
    return day.strftime("%Y-%m-%d")


def format_datetime(moment: datetime) -> str:
    """Format as ``YYYY-MM-DD HH:MM``."""
    return moment.strftime("%Y-%m-%d %H:%M")
