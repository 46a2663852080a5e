"""
Conversion API routes: funnels and goals.
"""
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from quietstats.core.exceptions import FunnelNotFoundError
from quietstats.routers.params import DEFAULT_FILTER, Analytics, PeriodFilter
from quietstats.schemas.conversion import FunnelAnalysis, GoalStats

router = APIRouter(prefix="/projects/{project_id}", tags=["conversions"])


@router.get("/funnels/{funnel_id}/analysis", response_model=FunnelAnalysis)
async def analyze_funnel(
    project_id: UUID,
    funnel_id: UUID,
    service: Analytics,
    period: PeriodFilter = DEFAULT_FILTER,
) -> FunnelAnalysis:
    """Track sessions through a funnel's steps in order."""
    try:
        return await service.analyze_funnel(project_id, funnel_id, period)
    except FunnelNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.get("/goals/stats", response_model=list[GoalStats])
async def get_goal_stats(
    project_id: UUID,
    service: Analytics,
    period: PeriodFilter = DEFAULT_FILTER,
) -> list[GoalStats]:
    """Get conversions for every active goal, with the previous window for comparison."""
    return await service.get_goal_stats(project_id, period)
