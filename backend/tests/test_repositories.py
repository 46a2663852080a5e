"""
Tests for repository query construction.
"""
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from quietstats.models.event import EventType
from quietstats.repositories.event import EventRepository


class TestEventRepository:
    """Tests for EventRepository.list_for_window."""

    @pytest.fixture
    def session(self, make_event):
        result = MagicMock()
        result.scalars.return_value.all.return_value = [make_event(EventType.CUSTOM)]
        session = AsyncMock()
        session.execute = AsyncMock(return_value=result)
        return session

    async def test_filters_by_event_type(self, session, now):
        repo = EventRepository(session)

        events = await repo.list_for_window(
            uuid4(), now - timedelta(days=1), now, event_type=EventType.CUSTOM
        )

        assert len(events) == 1
        stmt = session.execute.await_args.args[0]
        assert "events.event_type =" in str(stmt)
        assert "custom" in stmt.compile().params.values()

    async def test_without_event_type(self, session, now):
        repo = EventRepository(session)

        await repo.list_for_window(uuid4(), now - timedelta(days=1), now)

        stmt = session.execute.await_args.args[0]
        assert "events.event_type =" not in str(stmt)
        assert "ORDER BY events.timestamp, events.id" in str(stmt)
