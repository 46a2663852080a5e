"""
Funnel models - ordered multi-step conversion definitions.
"""
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quietstats.core.database import Base

if TYPE_CHECKING:
    from quietstats.models.project import Project


class MatchType(str, Enum):
    """How a funnel step or goal recognises an event."""

    URL = "url"  # pageview with an exactly equal path
    EVENT = "event"  # custom event with an exactly equal name


class Funnel(Base):
    """A named funnel owned by a project."""

    __tablename__ = "funnels"

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
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="funnels")
    steps: Mapped[list["FunnelStep"]] = relationship(
        "FunnelStep",
        back_populates="funnel",
        cascade="all, delete-orphan",
        order_by="FunnelStep.step_number",
    )

    def __repr__(self) -> str:
        return f"<Funnel {self.name}>"


class FunnelStep(Base):
    """One step of a funnel; step numbers run contiguously from 1."""

    __tablename__ = "funnel_steps"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    funnel_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("funnels.id", ondelete="CASCADE"),
        index=True,
    )
    step_number: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    step_type: Mapped[str] = mapped_column(String(20), nullable=False)
    match_value: Mapped[str] = mapped_column(String(512), nullable=False)

    # Relationships
    funnel: Mapped["Funnel"] = relationship("Funnel", back_populates="steps")

    __table_args__ = (
        UniqueConstraint("funnel_id", "step_number", name="uq_funnel_steps_number"),
    )

    def __repr__(self) -> str:
        return f"<FunnelStep {self.step_number}: {self.step_type}={self.match_value}>"
