"""
Repository package for data access layer.
"""
from quietstats.repositories.base import BaseRepository
from quietstats.repositories.event import EventRepository
from quietstats.repositories.funnel import FunnelRepository
from quietstats.repositories.goal import GoalRepository
from quietstats.repositories.segment import SegmentRepository

__all__ = [
    "BaseRepository",
    "EventRepository",
    "FunnelRepository",
    "GoalRepository",
    "SegmentRepository",
]
