"""
Core package containing configuration, database, logging, and exceptions.
"""
from quietstats.core.config import settings
from quietstats.core.database import Base, DbSession, get_db_session
from quietstats.core.exceptions import (
    FunnelNotFoundError,
    NotFoundError,
    QuietStatsError,
    SegmentNotFoundError,
)
from quietstats.core.logging import configure_logging, get_logger

__all__ = [
    "settings",
    "Base",
    "DbSession",
    "get_db_session",
    "configure_logging",
    "get_logger",
    "QuietStatsError",
    "NotFoundError",
    "FunnelNotFoundError",
    "SegmentNotFoundError",
]
