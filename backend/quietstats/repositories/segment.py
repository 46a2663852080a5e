"""
Segment repository for saved segment definitions.
"""
from quietstats.models.segment import Segment
from quietstats.repositories.base import BaseRepository


class SegmentRepository(BaseRepository[Segment]):
    """Repository for Segment model operations."""

    model = Segment
