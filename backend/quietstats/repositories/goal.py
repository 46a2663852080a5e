"""
Goal repository for conversion goal definitions.
"""
from uuid import UUID

from sqlalchemy import select

from quietstats.models.goal import ConversionGoal
from quietstats.repositories.base import BaseRepository


class GoalRepository(BaseRepository[ConversionGoal]):
    """Repository for ConversionGoal model operations."""

    model = ConversionGoal

    async def list_active(self, project_id: UUID | str) -> list[ConversionGoal]:
        """Get a project's active goals, oldest first."""
        stmt = (
            select(ConversionGoal)
            .where(
                ConversionGoal.project_id == project_id,
                ConversionGoal.is_active.is_(True),
            )
            .order_by(ConversionGoal.created_at)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
