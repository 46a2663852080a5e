"""
Report API routes: dashboard report, comparison, trend line and calendar.
"""
from uuid import UUID

from fastapi import APIRouter

from quietstats.routers.params import DEFAULT_FILTER, Analytics, PeriodFilter
from quietstats.schemas.report import (
    ComparisonReport,
    ContributionCalendar,
    ProjectReport,
    TimeSeriesPoint,
)

router = APIRouter(prefix="/projects/{project_id}", tags=["reports"])


@router.get("/report", response_model=ProjectReport)
async def get_report(
    project_id: UUID,
    service: Analytics,
    period: PeriodFilter = DEFAULT_FILTER,
) -> ProjectReport:
    """Get the full dashboard report for the selected window."""
    return await service.get_report(project_id, period)


@router.get("/report/comparison", response_model=ComparisonReport)
async def get_comparison(
    project_id: UUID,
    service: Analytics,
    period: PeriodFilter = DEFAULT_FILTER,
) -> ComparisonReport:
    """Get current and previous window reports with the current trend line."""
    return await service.get_comparison(project_id, period)


@router.get("/timeseries", response_model=list[TimeSeriesPoint])
async def get_time_series(
    project_id: UUID,
    service: Analytics,
    period: PeriodFilter = DEFAULT_FILTER,
) -> list[TimeSeriesPoint]:
    return await service.get_time_series(project_id, period)


@router.get("/calendar", response_model=ContributionCalendar)
async def get_contribution_calendar(
    project_id: UUID,
    service: Analytics,
) -> ContributionCalendar:
    """Get daily visit intensity for the last 365 days."""
    return await service.get_contribution_calendar(project_id)
