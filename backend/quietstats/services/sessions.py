"""
Session reconstruction.

A session is every event sharing a session id inside the queried window,
ordered by timestamp. Sorting is stable, so events with equal timestamps keep
the order in which storage returned them.
"""
from collections.abc import Iterable, Mapping, Sequence
from typing import Optional

from quietstats.models.event import Event, EventType
from quietstats.services.periods import as_utc
from quietstats.services.rates import mean, percentage

SessionMap = Mapping[str, Sequence[Event]]


def group_sessions(events: Iterable[Event]) -> dict[str, list[Event]]:
    """Group events by session id, each group sorted chronologically."""
    grouped: dict[str, list[Event]] = {}
    for event in events:
        grouped.setdefault(event.session_id, []).append(event)

    return {
        session_id: sorted(session_events, key=lambda e: as_utc(e.timestamp))
        for session_id, session_events in grouped.items()
    }


def pageviews(session_events: Sequence[Event]) -> list[Event]:
    return [e for e in session_events if e.event_type == EventType.PAGEVIEW.value]


def entry_page(session_events: Sequence[Event]) -> Optional[str]:
    """Path of the first pageview, if the session has any."""
    views = pageviews(session_events)
    return views[0].path if views else None


def exit_page(session_events: Sequence[Event]) -> Optional[str]:
    """Path of the last pageview, if the session has any."""
    views = pageviews(session_events)
    return views[-1].path if views else None


def has_event_type(session_events: Sequence[Event], event_type: EventType) -> bool:
    return any(e.event_type == event_type.value for e in session_events)


def is_bounce(session_events: Sequence[Event]) -> bool:
    """One distinct pageview path and no heartbeat."""
    distinct_paths = {e.path for e in pageviews(session_events)}
    return len(distinct_paths) == 1 and not has_event_type(session_events, EventType.HEARTBEAT)


def bounce_rate(sessions: SessionMap) -> float:
    bounced = sum(1 for session_events in sessions.values() if is_bounce(session_events))
    return percentage(bounced, len(sessions))


def estimated_duration(session_events: Sequence[Event], heartbeat_interval: int) -> int:
    """
    Seconds spent in the session, estimated from heartbeats.

    Undercounts sessions shorter than one heartbeat interval.
    """
    heartbeats = sum(1 for e in session_events if e.event_type == EventType.HEARTBEAT.value)
    return heartbeats * heartbeat_interval


def average_session_duration(sessions: SessionMap, heartbeat_interval: int) -> float:
    return mean(
        estimated_duration(session_events, heartbeat_interval)
        for session_events in sessions.values()
    )


def session_conversion_rate(sessions: SessionMap) -> float:
    """Share of sessions that fired at least one custom event."""
    converted = sum(
        1 for session_events in sessions.values()
        if has_event_type(session_events, EventType.CUSTOM)
    )
    return percentage(converted, len(sessions))
