"""
Project model - a tracked website.
"""
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quietstats.core.database import Base

if TYPE_CHECKING:
    from quietstats.models.event import Event
    from quietstats.models.funnel import Funnel
    from quietstats.models.goal import ConversionGoal
    from quietstats.models.segment import Segment


class Project(Base):
    """A website whose anonymized visits are collected."""

    __tablename__ = "projects"

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    domain: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    # Relationships
    events: Mapped[list["Event"]] = relationship(
        "Event",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    funnels: Mapped[list["Funnel"]] = relationship(
        "Funnel",
        back_populates="project",
        cascade="all, delete-orphan",
    )
    goals: Mapped[list["ConversionGoal"]] = relationship(
        "ConversionGoal",
        back_populates="project",
        cascade="all, delete-orphan",
    )
    segments: Mapped[list["Segment"]] = relationship(
        "Segment",
        back_populates="project",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Project {self.domain}>"
