"""
SQLAlchemy models package.
All models are imported here for easy access and Alembic discovery.
"""
from quietstats.models.event import Event, EventType
from quietstats.models.funnel import Funnel, FunnelStep, MatchType
from quietstats.models.goal import ConversionGoal
from quietstats.models.project import Project
from quietstats.models.segment import Segment

__all__ = [
    "Project",
    "Event",
    "EventType",
    "Funnel",
    "FunnelStep",
    "MatchType",
    "ConversionGoal",
    "Segment",
]
