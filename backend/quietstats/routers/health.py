"""
Health and readiness probes.
"""
from datetime import datetime, timezone

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from quietstats.core.config import settings
from quietstats.core.database import DbSession, is_db_available

router = APIRouter(tags=["health"])


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/")
async def root() -> dict:
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@router.get("/health")
async def health_check() -> dict:
    """Process is up; reports whether the event store was reachable at startup."""
    return {
        "status": "healthy",
        "timestamp": _timestamp(),
        "version": settings.app_version,
        "database": "available" if is_db_available() else "unavailable",
    }


@router.get("/health/ready")
async def readiness_check(session: DbSession) -> dict:
    """
    Ready when the event store answers a trivial query.
    Responds 503 instead when the database was down at startup.
    """
    try:
        await session.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as e:
        db_status = f"error: {e}"

    return {
        "status": "ready" if db_status == "connected" else "not_ready",
        "checks": {"database": db_status},
        "timestamp": _timestamp(),
    }


@router.get("/health/live")
async def liveness_check() -> dict:
    return {"status": "alive", "timestamp": _timestamp()}
