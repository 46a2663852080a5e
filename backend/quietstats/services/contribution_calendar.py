"""
Contribution calendar - a year of daily traffic binned into intensity levels.
"""
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Optional

from quietstats.models.event import Event
from quietstats.schemas.report import ContributionCalendar, ContributionDay
from quietstats.services.periods import as_utc, utc_now

CALENDAR_DAYS = 365


def intensity_level(visits: int, max_visits: int) -> int:
    """
    Bin a day's visits against the busiest day, 0 (none) to 4.

    Boundaries are strict, so a day exactly on a quartile lands in the
    higher level.
    """
    if visits == 0:
        return 0
    if visits < max_visits * 0.25:
        return 1
    if visits < max_visits * 0.50:
        return 2
    if visits < max_visits * 0.75:
        return 3
    return 4


def generate_contribution_calendar(
    events: Iterable[Event],
    now: Optional[datetime] = None,
) -> ContributionCalendar:
    """
    Build the 365-day calendar ending at ``now``.

    Every calendar date from ``now - 365 days`` to ``now`` is present, both
    ends included, so a full window yields 366 entries. Days without traffic
    have level 0.
    """
    end = as_utc(now) if now is not None else utc_now()
    start = end - timedelta(days=CALENDAR_DAYS)

    visits: dict[date, int] = {}
    visitors: dict[date, set[str]] = {}
    for event in events:
        timestamp = as_utc(event.timestamp)
        if timestamp < start or timestamp > end:
            continue
        day = timestamp.date()
        visits[day] = visits.get(day, 0) + 1
        visitors.setdefault(day, set()).add(event.visitor_hash)

    max_visits = max(visits.values(), default=0) or 1

    days = []
    day = start.date()
    while day <= end.date():
        count = visits.get(day, 0)
        days.append(
            ContributionDay(
                date=day.isoformat(),
                visits=count,
                unique_visitors=len(visitors.get(day, ())),
                level=intensity_level(count, max_visits),
            )
        )
        day += timedelta(days=1)

    return ContributionCalendar(
        days=days,
        max_visits=max_visits,
        start_date=start.date().isoformat(),
        end_date=end.date().isoformat(),
    )
