"""
Event model - the append-only stream of anonymized visit events.
"""
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quietstats.core.database import Base

if TYPE_CHECKING:
    from quietstats.models.project import Project


class EventType(str, Enum):
    """Kinds of events the tracker emits."""

    PAGEVIEW = "pageview"
    HEARTBEAT = "heartbeat"
    CUSTOM = "custom"
    SCROLL = "scroll"
    OUTBOUND = "outbound"
    DOWNLOAD = "download"


class Event(Base):
    """
    A single anonymized visit event.

    Rows are written once by the collection layer and never updated.
    Location columns may be null depending on the project's privacy mode.
    """

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    project_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Identity (rotating hashes, never raw identifiers)
    visitor_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    session_id: Mapped[str] = mapped_column(String(64), nullable=False)

    # What happened
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)
    event_name: Mapped[Optional[str]] = mapped_column(String(100))
    path: Mapped[str] = mapped_column(String(512), nullable=False)
    referrer: Mapped[Optional[str]] = mapped_column(String(512))
    target_url: Mapped[Optional[str]] = mapped_column(String(2048))
    scroll_depth: Mapped[Optional[int]] = mapped_column(Integer)
    properties: Mapped[Optional[str]] = mapped_column(Text)  # loosely JSON-shaped

    # Location
    country: Mapped[Optional[str]] = mapped_column(String(100))
    region: Mapped[Optional[str]] = mapped_column(String(100))
    city: Mapped[Optional[str]] = mapped_column(String(100))

    # Client
    browser: Mapped[Optional[str]] = mapped_column(String(50))
    os: Mapped[Optional[str]] = mapped_column(String(50))
    device: Mapped[Optional[str]] = mapped_column(String(50))

    # Campaign
    utm_source: Mapped[Optional[str]] = mapped_column(String(255))
    utm_medium: Mapped[Optional[str]] = mapped_column(String(255))
    utm_campaign: Mapped[Optional[str]] = mapped_column(String(255))
    utm_term: Mapped[Optional[str]] = mapped_column(String(255))
    utm_content: Mapped[Optional[str]] = mapped_column(String(255))

    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="events")

    __table_args__ = (
        Index("idx_events_timestamp", "timestamp"),
        Index("idx_events_project_timestamp", "project_id", "timestamp"),
        Index("idx_events_project_session", "project_id", "session_id"),
        Index("idx_events_project_type_timestamp", "project_id", "event_type", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<Event {self.event_type} {self.path} @ {self.timestamp}>"
