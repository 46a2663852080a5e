"""
Funnel analysis - strictly ordered multi-step session matching.

Sessions advance through steps as a fold: each step receives an immutable
mapping of the sessions still in the funnel to the timestamp of their previous
match and returns a new mapping for the next step. A session that misses a
step is gone for good.
"""
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Optional

from quietstats.models.event import Event
from quietstats.models.funnel import Funnel, FunnelStep
from quietstats.schemas.conversion import (
    FunnelAnalysis,
    FunnelResponse,
    FunnelStepAnalysis,
    FunnelStepResponse,
)
from quietstats.services.criteria import matches_criterion
from quietstats.services.periods import as_utc
from quietstats.services.rates import mean, percentage
from quietstats.services.sessions import group_sessions

# Session id -> timestamp of the previous step's match. None means the session
# has no ordering constraint yet (only before the first step).
QualifiedSessions = Mapping[str, Optional[datetime]]


@dataclass(frozen=True)
class StepOutcome:
    """Sessions that matched a step and the gaps since their previous match."""

    qualified: QualifiedSessions
    seconds_from_previous: tuple[float, ...]


def _first_match(
    session_events: Sequence[Event],
    step: FunnelStep,
    after: Optional[datetime],
) -> Optional[Event]:
    """First event matching the step strictly after ``after``; ties never pass."""
    for event in session_events:
        if after is not None and as_utc(event.timestamp) <= after:
            continue
        if matches_criterion(event, step.step_type, step.match_value):
            return event
    return None


def advance_step(
    step: FunnelStep,
    sessions: Mapping[str, Sequence[Event]],
    qualified: QualifiedSessions,
) -> StepOutcome:
    """Move every qualified session through one step."""
    advanced: dict[str, Optional[datetime]] = {}
    gaps: list[float] = []

    for session_id, after in qualified.items():
        match = _first_match(sessions.get(session_id, ()), step, after)
        if match is None:
            continue

        matched_at = as_utc(match.timestamp)
        advanced[session_id] = matched_at
        if after is not None:
            gaps.append((matched_at - after).total_seconds())

    return StepOutcome(
        qualified=MappingProxyType(advanced),
        seconds_from_previous=tuple(gaps),
    )


def funnel_response(funnel: Funnel) -> FunnelResponse:
    return FunnelResponse(
        id=str(funnel.id),
        name=funnel.name,
        steps=[
            FunnelStepResponse(
                id=str(step.id),
                step_number=step.step_number,
                name=step.name,
                step_type=step.step_type,
                match_value=step.match_value,
            )
            for step in sorted(funnel.steps, key=lambda s: s.step_number)
        ],
        created_at=funnel.created_at.isoformat() if funnel.created_at else "",
    )


def analyze_funnel(funnel: Funnel, events: Sequence[Event]) -> FunnelAnalysis:
    """
    Track sessions through the funnel's steps in order.

    Args:
        funnel: Funnel definition with its steps loaded
        events: Every event of the funnel's project inside the window

    Returns:
        FunnelAnalysis with per-step sessions, conversion, drop-off and timing
    """
    response = funnel_response(funnel)
    steps = sorted(funnel.steps, key=lambda s: s.step_number)
    if not steps:
        return FunnelAnalysis(funnel=response, total_sessions=0, steps=[])

    sessions = group_sessions(events)
    total_sessions = len(sessions)

    qualified: QualifiedSessions = MappingProxyType(dict.fromkeys(sessions))
    analyses: list[FunnelStepAnalysis] = []

    for step in steps:
        outcome = advance_step(step, sessions, qualified)
        reached = len(outcome.qualified)
        previous = len(qualified)

        analyses.append(
            FunnelStepAnalysis(
                step_number=step.step_number,
                name=step.name,
                sessions=reached,
                conversion_rate=percentage(reached, total_sessions),
                drop_off_rate=percentage(previous - reached, previous),
                avg_time_from_previous=(
                    mean(outcome.seconds_from_previous)
                    if outcome.seconds_from_previous
                    else None
                ),
            )
        )
        qualified = outcome.qualified

    return FunnelAnalysis(funnel=response, total_sessions=total_sessions, steps=analyses)
