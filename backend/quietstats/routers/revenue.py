"""
Revenue API routes.
"""
from uuid import UUID

from fastapi import APIRouter

from quietstats.routers.params import DEFAULT_FILTER, Analytics, PeriodFilter
from quietstats.schemas.revenue import RevenueAttribution, RevenueByEvent, RevenueStats

router = APIRouter(prefix="/projects/{project_id}/revenue", tags=["revenue"])


@router.get("", response_model=RevenueStats)
async def get_revenue(
    project_id: UUID,
    service: Analytics,
    period: PeriodFilter = DEFAULT_FILTER,
) -> RevenueStats:
    """Get revenue totals for the window and the window before it."""
    return await service.get_revenue(project_id, period)


@router.get("/events", response_model=list[RevenueByEvent])
async def get_revenue_by_event(
    project_id: UUID,
    service: Analytics,
    period: PeriodFilter = DEFAULT_FILTER,
) -> list[RevenueByEvent]:
    return await service.get_revenue_by_event(project_id, period)


@router.get("/attribution", response_model=list[RevenueAttribution])
async def get_revenue_attribution(
    project_id: UUID,
    service: Analytics,
    period: PeriodFilter = DEFAULT_FILTER,
) -> list[RevenueAttribution]:
    """Get revenue credited to each session's first-touch source."""
    return await service.get_revenue_attribution(project_id, period)
