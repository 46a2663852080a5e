"""
Event repository - windowed reads over the event stream.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select

from quietstats.models.event import Event, EventType
from quietstats.repositories.base import BaseRepository


class EventRepository(BaseRepository[Event]):
    """Repository for Event reads. Events are never written through here."""

    model = Event

    async def list_for_window(
        self,
        project_id: UUID | str,
        start: datetime,
        end: datetime,
        event_type: Optional[EventType] = None,
    ) -> list[Event]:
        """
        Get a project's events with start <= timestamp <= end.

        Rows come back in timestamp order, then insertion order, so ties keep
        a stable order for session reconstruction.
        """
        stmt = select(Event).where(
            Event.project_id == project_id,
            Event.timestamp >= start,
            Event.timestamp <= end,
        )
        if event_type is not None:
            stmt = stmt.where(Event.event_type == event_type.value)

        stmt = stmt.order_by(Event.timestamp, Event.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
