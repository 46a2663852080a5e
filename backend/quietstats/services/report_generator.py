"""
Report generation - the full dashboard report for one project and window.

Every function here is pure: it receives the events already fetched for the
window and never touches storage.
"""
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from operator import attrgetter
from typing import Any, Optional

from quietstats.models.event import Event, EventType
from quietstats.schemas.report import (
    ActivityCell,
    PeakTimeAnalysis,
    ProjectReport,
    StatEntry,
    VisitSnippet,
)
from quietstats.services.periods import as_utc
from quietstats.services.sessions import (
    average_session_duration,
    bounce_rate,
    entry_page,
    exit_page,
    group_sessions,
    session_conversion_rate,
)

UNKNOWN = "Unknown"
DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

TOP_HOURS = 5
TOP_DAYS = 3


def _label(value: Any) -> str:
    return UNKNOWN if value is None else str(value)


def _top(labels: Iterable[str], limit: int) -> list[StatEntry]:
    # most_common keeps first-seen order between equal counts
    return [
        StatEntry(label=label, value=count)
        for label, count in Counter(labels).most_common(limit)
    ]


def breakdown(
    events: Iterable[Event],
    dimension: str | Callable[[Event], Any],
    limit: int = 10,
) -> list[StatEntry]:
    """
    Count events per value of a dimension, highest first.

    ``dimension`` is an Event attribute name or a callable; null values are
    counted under "Unknown".
    """
    if isinstance(dimension, str):
        dimension = attrgetter(dimension)
    return _top((_label(dimension(e)) for e in events), limit)


def _known_only(entries: list[StatEntry]) -> list[StatEntry]:
    return [entry for entry in entries if entry.label != UNKNOWN]


def _of_type(events: Iterable[Event], event_type: EventType) -> list[Event]:
    return [e for e in events if e.event_type == event_type.value]


def _day_of_week(event: Event) -> int:
    # Python weeks start on Monday=0; cells use Sunday=0
    return (as_utc(event.timestamp).weekday() + 1) % 7


def generate_activity_heatmap(events: Iterable[Event]) -> list[ActivityCell]:
    """Event counts per (day of week, hour of day), ordered by day then hour."""
    counts = Counter(
        (_day_of_week(e), as_utc(e.timestamp).hour) for e in events
    )
    return [
        ActivityCell(day_of_week=day, hour_of_day=hour, count=counts[(day, hour)])
        for day, hour in sorted(counts)
    ]


def analyze_peak_times(heatmap: Sequence[ActivityCell]) -> PeakTimeAnalysis:
    """
    Identify the busiest hours and days.

    topHours and topDays rank totals summed across the grid, while peakHour and
    peakDay come from the single busiest cell. The two can disagree.
    """
    hour_totals: dict[int, int] = {}
    day_totals: dict[int, int] = {}
    for cell in heatmap:
        hour_totals[cell.hour_of_day] = hour_totals.get(cell.hour_of_day, 0) + cell.count
        day_totals[cell.day_of_week] = day_totals.get(cell.day_of_week, 0) + cell.count

    top_hours = sorted(hour_totals.items(), key=lambda item: item[1], reverse=True)
    top_days = sorted(day_totals.items(), key=lambda item: item[1], reverse=True)

    peak_cell = max(heatmap, key=lambda cell: cell.count, default=None)

    return PeakTimeAnalysis(
        top_hours=[StatEntry(label=f"{hour}:00", value=total) for hour, total in top_hours[:TOP_HOURS]],
        top_days=[StatEntry(label=DAY_NAMES[day], value=total) for day, total in top_days[:TOP_DAYS]],
        peak_hour=peak_cell.hour_of_day if peak_cell else 0,
        peak_day=peak_cell.day_of_week if peak_cell else 0,
    )


def scroll_depth_distribution(events: Iterable[Event]) -> list[StatEntry]:
    """Scroll events per recorded depth, shallowest first."""
    depths = Counter(
        e.scroll_depth for e in _of_type(events, EventType.SCROLL)
        if e.scroll_depth is not None
    )
    return [StatEntry(label=f"{depth}%", value=depths[depth]) for depth in sorted(depths)]


def target_url_breakdown(
    events: Iterable[Event],
    event_type: EventType,
    limit: int = 10,
) -> list[StatEntry]:
    """Most frequent target URLs for outbound clicks or downloads."""
    targets = [e.target_url for e in _of_type(events, event_type) if e.target_url is not None]
    return _top(targets, limit)


def region_breakdown(events: Iterable[Event], limit: int = 10) -> list[StatEntry]:
    """Top (country, region) pairs labelled "region, country"; unknown regions dropped."""
    top_pairs = Counter((e.country, e.region) for e in events).most_common(limit)
    return [
        StatEntry(label=f"{region}, {_label(country)}", value=count)
        for (country, region), count in top_pairs
        if region is not None and region != UNKNOWN
    ]


def last_visits(events: Iterable[Event], limit: int = 10) -> list[VisitSnippet]:
    recent = sorted(events, key=lambda e: as_utc(e.timestamp), reverse=True)[:limit]
    return [
        VisitSnippet(
            path=e.path,
            timestamp=as_utc(e.timestamp).isoformat(),
            city=e.city,
            country=e.country,
        )
        for e in recent
    ]


def generate_report(
    events: Sequence[Event],
    *,
    heartbeat_interval: int = 30,
    limit: int = 10,
    last_visits_limit: Optional[int] = None,
) -> ProjectReport:
    """
    Assemble the complete report for the events of one window.

    Args:
        events: Every event of the project inside the window, any order
        heartbeat_interval: Tracker heartbeat period in seconds
        limit: Size of each top-N breakdown
        last_visits_limit: Number of recent visits to include (defaults to ``limit``)

    Returns:
        ProjectReport ready for serialization
    """
    sessions = group_sessions(events)
    heatmap = generate_activity_heatmap(events)

    entry_pages = _top(
        (page for page in map(entry_page, sessions.values()) if page is not None),
        limit,
    )
    exit_pages = _top(
        (page for page in map(exit_page, sessions.values()) if page is not None),
        limit,
    )

    custom_events = [
        e for e in _of_type(events, EventType.CUSTOM) if e.event_name is not None
    ]

    return ProjectReport(
        total_views=len(events),
        unique_visitors=len({e.visitor_hash for e in events}),
        top_pages=breakdown(events, "path", limit),
        browsers=breakdown(events, "browser", limit),
        oss=breakdown(events, "os", limit),
        devices=breakdown(events, "device", limit),
        referrers=breakdown(events, "referrer", limit),
        countries=breakdown(events, "country", limit),
        custom_events=breakdown(custom_events, "event_name", limit),
        last_visits=last_visits(events, last_visits_limit or limit),
        activity_heatmap=heatmap,
        peak_time_analysis=analyze_peak_times(heatmap),
        bounce_rate=bounce_rate(sessions),
        utm_sources=_known_only(breakdown(events, "utm_source", limit)),
        utm_mediums=_known_only(breakdown(events, "utm_medium", limit)),
        utm_campaigns=_known_only(breakdown(events, "utm_campaign", limit)),
        scroll_depth_distribution=scroll_depth_distribution(events),
        total_sessions=len(sessions),
        avg_session_duration=average_session_duration(sessions, heartbeat_interval),
        entry_pages=entry_pages,
        exit_pages=exit_pages,
        outbound_links=target_url_breakdown(events, EventType.OUTBOUND, limit),
        file_downloads=target_url_breakdown(events, EventType.DOWNLOAD, limit),
        regions=region_breakdown(events, limit),
        conversion_rate=session_conversion_rate(sessions),
    )
