"""
Funnel repository for funnel definitions.
"""
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from quietstats.models.funnel import Funnel
from quietstats.repositories.base import BaseRepository


class FunnelRepository(BaseRepository[Funnel]):
    """Repository for Funnel model operations."""

    model = Funnel

    async def get_with_steps(
        self,
        funnel_id: UUID | str,
        project_id: UUID | str,
    ) -> Optional[Funnel]:
        """Get a project's funnel with its steps eagerly loaded."""
        stmt = (
            select(Funnel)
            .options(selectinload(Funnel.steps))
            .where(Funnel.id == funnel_id, Funnel.project_id == project_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
