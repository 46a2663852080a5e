"""
Base repository with common read operations.
Implements the Repository pattern for data access abstraction.
"""
from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quietstats.core.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository providing common database operations.

    Subclasses should set the `model` class attribute to the SQLAlchemy model.
    Every model served here carries a ``project_id`` column.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_for_project(
        self,
        id: UUID | str,
        project_id: UUID | str,
    ) -> ModelType | None:
        """Get a record only if it belongs to the given project."""
        stmt = select(self.model).where(
            self.model.id == id,
            self.model.project_id == project_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

