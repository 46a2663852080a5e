"""
Segment filter evaluation.

A chain of filters is folded strictly left to right with no precedence: the
``logic`` of filter i decides how filter i+1 joins the accumulated result.
"""
from collections.abc import Callable, Sequence
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from quietstats.core.logging import get_logger
from quietstats.models.event import Event
from quietstats.models.segment import Segment
from quietstats.schemas.segment import (
    FilterLogic,
    SegmentAnalysis,
    SegmentField,
    SegmentFilter,
    SegmentOperator,
)
from quietstats.services.report_generator import breakdown
from quietstats.services.sessions import bounce_rate, group_sessions

logger = get_logger(__name__)

_filter_list = TypeAdapter(list[SegmentFilter])

FIELD_ATTRIBUTES: dict[SegmentField, str] = {
    SegmentField.BROWSER: "browser",
    SegmentField.OS: "os",
    SegmentField.DEVICE: "device",
    SegmentField.COUNTRY: "country",
    SegmentField.CITY: "city",
    SegmentField.PATH: "path",
    SegmentField.REFERRER: "referrer",
    SegmentField.EVENT_TYPE: "event_type",
}

# Operands arrive lower-cased
OPERATORS: dict[SegmentOperator, Callable[[str, str], bool]] = {
    SegmentOperator.EQUALS: lambda actual, expected: actual == expected,
    SegmentOperator.NOT_EQUALS: lambda actual, expected: actual != expected,
    SegmentOperator.CONTAINS: lambda actual, expected: expected in actual,
    SegmentOperator.STARTS_WITH: lambda actual, expected: actual.startswith(expected),
}


def decode_filters(raw: Optional[str]) -> list[SegmentFilter]:
    """
    Decode a stored filter payload.

    A payload that is not a valid filter list degrades to no filters, so the
    segment matches every event instead of failing the analysis.
    """
    if not raw:
        return []
    try:
        return _filter_list.validate_json(raw)
    except ValidationError as e:
        logger.warning(
            "Invalid segment filter payload, matching all events",
            errors=e.error_count(),
        )
        return []


def matches_filter(event: Event, segment_filter: SegmentFilter) -> bool:
    """A null field never matches, whatever the operator."""
    value = getattr(event, FIELD_ATTRIBUTES[segment_filter.field])
    if value is None:
        return False
    compare = OPERATORS[segment_filter.operator]
    return compare(str(value).lower(), segment_filter.value.lower())


def apply_filters(event: Event, filters: Sequence[SegmentFilter]) -> bool:
    if not filters:
        return True

    result = matches_filter(event, filters[0])
    for previous, current in zip(filters, filters[1:]):
        matched = matches_filter(event, current)
        if previous.logic is FilterLogic.OR:
            result = result or matched
        else:
            result = result and matched
    return result


def analyze_segment(
    segment: Segment,
    events: Sequence[Event],
    *,
    limit: int = 10,
) -> SegmentAnalysis:
    """Summarize the events of a window that the segment matches."""
    filters = decode_filters(segment.filters_json)
    matching = [event for event in events if apply_filters(event, filters)]
    sessions = group_sessions(matching)

    return SegmentAnalysis(
        segment_id=str(segment.id),
        segment_name=segment.name,
        total_views=len(matching),
        unique_visitors=len({e.visitor_hash for e in matching}),
        bounce_rate=bounce_rate(sessions),
        top_pages=breakdown(matching, "path", limit),
        matching_events=len(matching),
    )
