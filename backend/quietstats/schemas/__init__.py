"""
Pydantic schemas package.
"""
from quietstats.schemas.conversion import (
    FunnelAnalysis,
    FunnelResponse,
    FunnelStepAnalysis,
    FunnelStepResponse,
    GoalResponse,
    GoalStats,
)
from quietstats.schemas.report import (
    ActivityCell,
    ComparisonReport,
    ContributionCalendar,
    ContributionDay,
    PeakTimeAnalysis,
    ProjectReport,
    StatEntry,
    TimeSeriesPoint,
    VisitSnippet,
)
from quietstats.schemas.revenue import RevenueAttribution, RevenueByEvent, RevenueStats
from quietstats.schemas.segment import (
    FilterLogic,
    SegmentAnalysis,
    SegmentField,
    SegmentFilter,
    SegmentOperator,
)

__all__ = [
    # Report
    "StatEntry",
    "VisitSnippet",
    "ActivityCell",
    "PeakTimeAnalysis",
    "TimeSeriesPoint",
    "ProjectReport",
    "ComparisonReport",
    "ContributionDay",
    "ContributionCalendar",
    # Funnels & goals
    "FunnelStepResponse",
    "FunnelResponse",
    "FunnelStepAnalysis",
    "FunnelAnalysis",
    "GoalResponse",
    "GoalStats",
    # Segments
    "SegmentField",
    "SegmentOperator",
    "FilterLogic",
    "SegmentFilter",
    "SegmentAnalysis",
    # Revenue
    "RevenueStats",
    "RevenueByEvent",
    "RevenueAttribution",
]
