"""
Time series aggregation - buckets events into hour, day or week slots.
"""
from collections.abc import Iterable
from datetime import datetime, timedelta

from quietstats.models.event import Event
from quietstats.schemas.report import TimeSeriesPoint
from quietstats.services.periods import Granularity, as_utc, granularity_for


def bucket_start(timestamp: datetime, granularity: Granularity) -> datetime:
    """Truncate a timestamp to the start of its bucket. Weeks start on Monday."""
    timestamp = as_utc(timestamp)
    if granularity is Granularity.HOUR:
        return timestamp.replace(minute=0, second=0, microsecond=0)

    day = timestamp.replace(hour=0, minute=0, second=0, microsecond=0)
    if granularity is Granularity.WEEK:
        return day - timedelta(days=day.weekday())
    return day


def generate_time_series(
    events: Iterable[Event],
    period_filter: str,
) -> list[TimeSeriesPoint]:
    """
    Build the trend line for a window.

    Granularity follows the filter: 24h by hour, 3d/7d by day, 30d/365d by
    week. Only buckets containing events are emitted, in ascending order.
    """
    granularity = granularity_for(period_filter)

    views: dict[datetime, int] = {}
    visitors: dict[datetime, set[str]] = {}
    for event in events:
        bucket = bucket_start(event.timestamp, granularity)
        views[bucket] = views.get(bucket, 0) + 1
        visitors.setdefault(bucket, set()).add(event.visitor_hash)

    return [
        TimeSeriesPoint(
            timestamp=bucket.isoformat(),
            views=views[bucket],
            unique_visitors=len(visitors[bucket]),
        )
        for bucket in sorted(views)
    ]
