"""
Revenue analysis - extract, aggregate and attribute monetary values.

Revenue travels inside custom event properties, e.g. the tracker call
``track("purchase", {revenue: 29.99})`` stores ``{"revenue":29.99}``. Values
are pulled out by a RevenueExtractor; aggregation never parses properties
itself, so the extractor can be swapped for a strict parser.
"""
import re
from collections.abc import Iterable, Sequence
from typing import Optional, Protocol
from urllib.parse import urlparse

from quietstats.models.event import Event, EventType
from quietstats.schemas.revenue import RevenueAttribution, RevenueByEvent, RevenueStats
from quietstats.services.rates import safe_divide, percentage
from quietstats.services.sessions import group_sessions, pageviews

DIRECT = "Direct"


class RevenueExtractor(Protocol):
    """Pulls a revenue amount out of an event's properties."""

    def extract(self, properties: Optional[str]) -> Optional[float]:
        ...


class PatternRevenueExtractor:
    """
    Best-effort extractor matching ``"revenue":<number>`` or ``"revenue":"<number>"``.

    Properties are not parsed as JSON; anything that does not match yields None.
    """

    pattern = re.compile(r'"revenue"\s*:\s*"?(\d+(?:\.\d+)?)"?')

    def extract(self, properties: Optional[str]) -> Optional[float]:
        if not properties or not properties.strip():
            return None
        match = self.pattern.search(properties)
        if match is None:
            return None
        return float(match.group(1))


default_extractor = PatternRevenueExtractor()


def revenue_events(
    events: Iterable[Event],
    extractor: RevenueExtractor = default_extractor,
) -> list[tuple[Event, float]]:
    """Custom events carrying a revenue value, paired with that value."""
    found = []
    for event in events:
        if event.event_type != EventType.CUSTOM.value or event.properties is None:
            continue
        revenue = extractor.extract(event.properties)
        if revenue is not None:
            found.append((event, revenue))
    return found


def _revenue_metrics(
    events: Sequence[Event],
    extractor: RevenueExtractor,
) -> tuple[float, int, float, float]:
    amounts = [revenue for _, revenue in revenue_events(events, extractor)]
    total = sum(amounts)
    transactions = len(amounts)
    visitors = {e.visitor_hash for e in pageviews(events)}
    return (
        total,
        transactions,
        safe_divide(total, transactions),
        safe_divide(total, len(visitors)),
    )


def calculate_revenue(
    current_events: Sequence[Event],
    previous_events: Sequence[Event],
    extractor: RevenueExtractor = default_extractor,
) -> RevenueStats:
    """Totals for the current window alongside the window before it."""
    total, transactions, aov, rpv = _revenue_metrics(current_events, extractor)
    prev_total, prev_transactions, prev_aov, prev_rpv = _revenue_metrics(
        previous_events, extractor
    )

    return RevenueStats(
        total_revenue=total,
        transactions=transactions,
        average_order_value=aov,
        revenue_per_visitor=rpv,
        previous_revenue=prev_total,
        previous_transactions=prev_transactions,
        previous_average_order_value=prev_aov,
        previous_revenue_per_visitor=prev_rpv,
    )


def calculate_revenue_by_event(
    events: Sequence[Event],
    *,
    limit: int = 20,
    extractor: RevenueExtractor = default_extractor,
) -> list[RevenueByEvent]:
    """Revenue grouped by custom event name, largest first."""
    totals: dict[str, list[float]] = {}
    for event, revenue in revenue_events(events, extractor):
        if event.event_name is None:
            continue
        totals.setdefault(event.event_name, []).append(revenue)

    rows = [
        RevenueByEvent(
            event_name=name,
            revenue=sum(amounts),
            transactions=len(amounts),
            avg_value=safe_divide(sum(amounts), len(amounts)),
        )
        for name, amounts in totals.items()
    ]
    rows.sort(key=lambda row: row.revenue, reverse=True)
    return rows[:limit]


def _referrer_host(referrer: str) -> str:
    try:
        host = urlparse(referrer).hostname
    except ValueError:
        return referrer
    if not host:
        return referrer
    return host.removeprefix("www.")


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def first_touch_source(first_pageview: Optional[Event]) -> str:
    """
    Traffic source recorded on a session's first pageview.

    Priority: UTM campaign, then UTM source, then referrer host, else "Direct".
    Blank values are skipped.
    """
    if first_pageview is None:
        return DIRECT
    if _present(first_pageview.utm_campaign):
        return f"utm:{first_pageview.utm_campaign}"
    if _present(first_pageview.utm_source):
        return f"utm:{first_pageview.utm_source}"
    if _present(first_pageview.referrer):
        return _referrer_host(first_pageview.referrer)
    return DIRECT


def calculate_revenue_attribution(
    events: Sequence[Event],
    *,
    limit: int = 20,
    extractor: RevenueExtractor = default_extractor,
) -> list[RevenueAttribution]:
    """
    Credit each revenue-bearing session to its first-touch source.

    Conversion rate per source is revenue sessions over all sessions whose
    first pageview came from that source.
    """
    session_revenue: dict[str, float] = {}
    for event, revenue in revenue_events(events, extractor):
        session_revenue[event.session_id] = session_revenue.get(event.session_id, 0.0) + revenue

    if not session_revenue:
        return []

    sources: dict[str, str] = {}
    for session_id, session_events in group_sessions(events).items():
        views = pageviews(session_events)
        if views:
            sources[session_id] = first_touch_source(views[0])

    sessions_by_source: dict[str, int] = {}
    for source in sources.values():
        sessions_by_source[source] = sessions_by_source.get(source, 0) + 1

    attributed: dict[str, list[float]] = {}
    for session_id, revenue in session_revenue.items():
        source = sources.get(session_id, DIRECT)
        attributed.setdefault(source, []).append(revenue)

    rows = [
        RevenueAttribution(
            source=source,
            revenue=sum(amounts),
            transactions=len(amounts),
            avg_value=safe_divide(sum(amounts), len(amounts)),
            conversion_rate=percentage(len(amounts), sessions_by_source.get(source, 0)),
        )
        for source, amounts in attributed.items()
    ]
    rows.sort(key=lambda row: row.revenue, reverse=True)
    return rows[:limit]
