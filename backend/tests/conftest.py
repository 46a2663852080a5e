"""
Shared fixtures for the QuietStats test suite.
"""
import os
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone
from itertools import count
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Settings are read at import time
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import httpx
import pytest
from fastapi.testclient import TestClient

from quietstats.core.database import get_db_session
from quietstats.main import app
from quietstats.models.event import Event, EventType
from quietstats.services.analytics_service import AnalyticsService, get_analytics_service

# A Wednesday
NOW = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)

EventFactory = Callable[..., Event]


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def project_id():
    return uuid4()


@pytest.fixture
def make_event() -> EventFactory:
    """
    Build in-memory events.

    Defaults to a pageview on "/" at NOW. ``at`` is an offset in seconds from
    NOW, ``session`` and ``visitor`` default to the same generated id.
    """
    ids = count(1)

    def factory(
        event_type: EventType | str = EventType.PAGEVIEW,
        *,
        session: str = "s1",
        visitor: str | None = None,
        at: float = 0,
        **fields,
    ) -> Event:
        if isinstance(event_type, EventType):
            event_type = event_type.value
        fields.setdefault("path", "/")
        fields.setdefault("timestamp", NOW + timedelta(seconds=at))
        return Event(
            id=next(ids),
            session_id=session,
            visitor_hash=visitor or f"v-{session}",
            event_type=event_type,
            **fields,
        )

    return factory


@pytest.fixture
def analytics_service() -> MagicMock:
    """AnalyticsService stand-in with every entry point mocked."""
    return MagicMock(spec=AnalyticsService)


@pytest.fixture
def db_session() -> AsyncMock:
    session = AsyncMock()
    session.execute = AsyncMock(return_value=MagicMock())
    return session


@pytest.fixture
def client(analytics_service: MagicMock, db_session: AsyncMock) -> Iterator[TestClient]:
    """Test client with storage replaced by mocks. Lifespan is not run."""

    async def override_db_session():
        yield db_session

    app.dependency_overrides[get_analytics_service] = lambda: analytics_service
    app.dependency_overrides[get_db_session] = override_db_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(client: TestClient):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
