"""
Segment Pydantic schemas.

Filter fields and operators are closed enums so that stored filter payloads are
fully validated when they are decoded.
"""
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quietstats.schemas.report import StatEntry


class SegmentField(str, Enum):
    """Event attributes a segment filter can test."""

    BROWSER = "browser"
    OS = "os"
    DEVICE = "device"
    COUNTRY = "country"
    CITY = "city"
    PATH = "path"
    REFERRER = "referrer"
    EVENT_TYPE = "eventType"


class SegmentOperator(str, Enum):
    """Case-insensitive string comparisons."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"


class FilterLogic(str, Enum):
    """How the next filter combines with the result so far."""

    AND = "AND"
    OR = "OR"


class SegmentFilter(BaseModel):
    """One predicate in a segment's filter chain."""

    field: SegmentField
    operator: SegmentOperator
    value: str
    logic: FilterLogic = FilterLogic.AND

    model_config = ConfigDict(frozen=True)

    @field_validator("logic", mode="before")
    @classmethod
    def normalize_logic(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value


class SegmentAnalysis(BaseModel):
    """Traffic summary for the events a segment matches."""

    segment_id: str = Field(alias="segmentId")
    segment_name: str = Field(alias="segmentName")
    total_views: int = Field(alias="totalViews")
    unique_visitors: int = Field(alias="uniqueVisitors")
    bounce_rate: float = Field(alias="bounceRate")
    top_pages: list[StatEntry] = Field(alias="topPages")
    matching_events: int = Field(alias="matchingEvents")

    model_config = ConfigDict(populate_by_name=True)
