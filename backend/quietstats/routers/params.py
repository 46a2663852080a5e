"""
Shared route parameters.
"""
from typing import Annotated

from fastapi import Depends, Query

from quietstats.core.config import settings
from quietstats.services.analytics_service import AnalyticsService, get_analytics_service

# Unknown keywords are accepted and resolve to a 7-day window
PeriodFilter = Annotated[
    str,
    Query(
        alias="filter",
        description="Window: 24h, 3d, 7d, 30d or 365d",
    ),
]

Analytics = Annotated[AnalyticsService, Depends(get_analytics_service)]

DEFAULT_FILTER = settings.default_filter
