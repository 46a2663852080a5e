"""
Segment API routes.
"""
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from quietstats.core.exceptions import SegmentNotFoundError
from quietstats.routers.params import DEFAULT_FILTER, Analytics, PeriodFilter
from quietstats.schemas.segment import SegmentAnalysis

router = APIRouter(prefix="/projects/{project_id}/segments", tags=["segments"])


@router.get("/{segment_id}/analysis", response_model=SegmentAnalysis)
async def analyze_segment(
    project_id: UUID,
    segment_id: UUID,
    service: Analytics,
    period: PeriodFilter = DEFAULT_FILTER,
) -> SegmentAnalysis:
    """Apply a saved segment's filters to the selected window."""
    try:
        return await service.analyze_segment(project_id, segment_id, period)
    except SegmentNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
