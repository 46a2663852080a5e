"""
Period resolution - maps a dashboard filter keyword to reporting windows.
"""
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

PERIOD_DURATIONS: dict[str, timedelta] = {
    "24h": timedelta(hours=24),
    "3d": timedelta(days=3),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "365d": timedelta(days=365),
}

# Unrecognized keywords silently fall back to a week.
DEFAULT_DURATION = timedelta(days=7)


class Granularity(str, Enum):
    """Time-series bucket size."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"


GRANULARITIES: dict[str, Granularity] = {
    "24h": Granularity.HOUR,
    "3d": Granularity.DAY,
    "7d": Granularity.DAY,
    "30d": Granularity.WEEK,
    "365d": Granularity.WEEK,
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def current_period(
    period_filter: str,
    now: Optional[datetime] = None,
) -> tuple[datetime, datetime]:
    """
    Get the (start, end) window for a filter keyword.

    The window ends at ``now`` (captured by the caller once per request) and
    spans 24h, 3d, 7d, 30d or 365d. Any other keyword yields 7 days.
    """
    end = as_utc(now) if now is not None else utc_now()
    start = end - PERIOD_DURATIONS.get(period_filter, DEFAULT_DURATION)
    return start, end


def previous_period(
    period_filter: str,
    now: Optional[datetime] = None,
) -> tuple[datetime, datetime]:
    """Get the equal-length window that ends where the current one starts."""
    current_start, current_end = current_period(period_filter, now)
    duration = current_end - current_start
    return current_start - duration, current_start


def granularity_for(period_filter: str) -> Granularity:
    return GRANULARITIES.get(period_filter, Granularity.DAY)
