"""
API routers package.
"""
from quietstats.routers.conversions import router as conversions_router
from quietstats.routers.health import router as health_router
from quietstats.routers.reports import router as reports_router
from quietstats.routers.revenue import router as revenue_router
from quietstats.routers.segments import router as segments_router

__all__ = [
    "health_router",
    "reports_router",
    "conversions_router",
    "segments_router",
    "revenue_router",
]
