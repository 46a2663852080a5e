"""
Goal engine - single-criterion conversion counting with period comparison.
"""
from collections.abc import Iterable, Sequence

from quietstats.models.event import Event
from quietstats.models.goal import ConversionGoal
from quietstats.schemas.conversion import GoalResponse, GoalStats
from quietstats.services.criteria import matches_criterion
from quietstats.services.rates import percentage


def goal_conversions(
    goal_type: str,
    match_value: str,
    events: Iterable[Event],
) -> tuple[int, float]:
    """
    Count sessions containing at least one matching event.

    Returns (converted sessions, conversion rate as a percentage of all
    sessions in ``events``). No ordering applies, unlike funnels.
    """
    all_sessions: set[str] = set()
    converted: set[str] = set()
    for event in events:
        all_sessions.add(event.session_id)
        if matches_criterion(event, goal_type, match_value):
            converted.add(event.session_id)

    return len(converted), percentage(len(converted), len(all_sessions))


def goal_response(goal: ConversionGoal) -> GoalResponse:
    return GoalResponse(
        id=str(goal.id),
        name=goal.name,
        goal_type=goal.goal_type,
        match_value=goal.match_value,
        is_active=bool(goal.is_active),
        created_at=goal.created_at.isoformat() if goal.created_at else "",
    )


def calculate_goal_stats(
    goals: Iterable[ConversionGoal],
    current_events: Sequence[Event],
    previous_events: Sequence[Event],
) -> list[GoalStats]:
    """Evaluate every active goal against the current and previous windows."""
    stats = []
    for goal in goals:
        if not goal.is_active:
            continue

        conversions, rate = goal_conversions(goal.goal_type, goal.match_value, current_events)
        previous_conversions, previous_rate = goal_conversions(
            goal.goal_type, goal.match_value, previous_events
        )
        stats.append(
            GoalStats(
                goal=goal_response(goal),
                conversions=conversions,
                conversion_rate=rate,
                previous_conversions=previous_conversions,
                previous_conversion_rate=previous_rate,
            )
        )
    return stats
