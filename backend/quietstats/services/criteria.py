"""
Exact-match criteria shared by funnel steps and conversion goals.
"""
from quietstats.models.event import Event, EventType
from quietstats.models.funnel import MatchType


def matches_criterion(event: Event, match_type: str, match_value: str) -> bool:
    """
    Check an event against a url|event criterion.

    "url" needs a pageview whose path equals the value; "event" needs a custom
    event whose name equals the value. Comparisons are exact. Unknown match
    types never match.
    """
    if match_type == MatchType.URL.value:
        return event.event_type == EventType.PAGEVIEW.value and event.path == match_value
    if match_type == MatchType.EVENT.value:
        return event.event_type == EventType.CUSTOM.value and event.event_name == match_value
    return False
