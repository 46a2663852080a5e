"""
Async SQLAlchemy engine and session handling for the event store.

The schema is owned by the Alembic migrations; this module only connects and
hands out read sessions.
"""
import re
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from quietstats.core.config import settings
from quietstats.core.logging import get_logger

logger = get_logger(__name__)

# Set by init_db(); report routes answer 503 while False
_db_available: bool = False


class Base(DeclarativeBase):
    """Declarative base shared by all QuietStats models."""


def async_database_url(url: str) -> str:
    """Select the asyncpg driver for plain postgresql:// URLs."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def sanitize_url(url: str) -> str:
    return re.sub(r":([^:@/]+)@", ":***@", url)


def create_engine() -> AsyncEngine:
    database_url = async_database_url(str(settings.database_url))
    logger.debug("Creating database engine", url=sanitize_url(database_url))

    return create_async_engine(
        database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )


engine = create_engine()
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a read session.

    Raises:
        HTTPException: 503 when the database was unreachable at startup
    """
    if not _db_available:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )

    async with async_session_factory() as session:
        try:
            yield session
        finally:
            # Reads only, nothing to commit
            await session.rollback()


DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def init_db() -> None:
    """
    Check that the event store is reachable.

    A failure is logged and leaves the API up with report routes disabled.
    """
    global _db_available
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        _db_available = False
        logger.warning("Database connection failed - report routes disabled", error=str(e))
        return

    _db_available = True
    logger.info("Database connection verified")


def is_db_available() -> bool:
    return _db_available


async def close_db() -> None:
    await engine.dispose()
    logger.info("Database connections closed", was_available=_db_available)
