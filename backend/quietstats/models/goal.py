"""
Conversion goal model - a single unordered url|event criterion.
"""
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, String, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quietstats.core.database import Base

if TYPE_CHECKING:
    from quietstats.models.project import Project


class ConversionGoal(Base):
    """Goal met by any session containing one matching event."""

    __tablename__ = "conversion_goals"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    project_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    goal_type: Mapped[str] = mapped_column(String(20), nullable=False)  # MatchType value
    match_value: Mapped[str] = mapped_column(String(512), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="goals")

    def __repr__(self) -> str:
        return f"<ConversionGoal {self.name}: {self.goal_type}={self.match_value}>"
