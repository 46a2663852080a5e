"""
Analytics service - resolves windows, fetches events and runs the engine.

Each public method captures "now" once, reads the events it needs through the
repositories and hands them to the pure engine functions. Nothing is cached
or written.
"""
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from quietstats.core.config import Settings, get_settings
from quietstats.core.database import DbSession
from quietstats.core.exceptions import FunnelNotFoundError, SegmentNotFoundError
from quietstats.core.logging import get_logger
from quietstats.models.event import Event
from quietstats.repositories import (
    EventRepository,
    FunnelRepository,
    GoalRepository,
    SegmentRepository,
)
from quietstats.schemas.conversion import FunnelAnalysis, GoalStats
from quietstats.schemas.report import (
    ComparisonReport,
    ContributionCalendar,
    ProjectReport,
    TimeSeriesPoint,
)
from quietstats.schemas.revenue import RevenueAttribution, RevenueByEvent, RevenueStats
from quietstats.schemas.segment import SegmentAnalysis
from quietstats.services import funnel_analyzer, segment_filter
from quietstats.services.contribution_calendar import (
    CALENDAR_DAYS,
    generate_contribution_calendar,
)
from quietstats.services.goal_engine import calculate_goal_stats
from quietstats.services.periods import current_period, previous_period, utc_now
from quietstats.services.report_generator import generate_report
from quietstats.services.revenue_analyzer import (
    calculate_revenue,
    calculate_revenue_attribution,
    calculate_revenue_by_event,
)
from quietstats.services.time_series import generate_time_series

logger = get_logger(__name__)


class AnalyticsService:
    """Entry points of the analytics engine for one database session."""

    def __init__(
        self,
        session: AsyncSession,
        settings: Optional[Settings] = None,
    ) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.events = EventRepository(session)
        self.funnels = FunnelRepository(session)
        self.goals = GoalRepository(session)
        self.segments = SegmentRepository(session)

    async def _window_events(
        self,
        project_id: UUID,
        window: tuple[datetime, datetime],
    ) -> list[Event]:
        start, end = window
        events = await self.events.list_for_window(project_id, start, end)
        logger.debug(
            "Fetched window events",
            project_id=str(project_id),
            start=start.isoformat(),
            end=end.isoformat(),
            count=len(events),
        )
        return events

    def _report(self, events: list[Event]) -> ProjectReport:
        return generate_report(
            events,
            heartbeat_interval=self.settings.heartbeat_interval_seconds,
            limit=self.settings.breakdown_limit,
            last_visits_limit=self.settings.last_visits_limit,
        )

    async def get_report(self, project_id: UUID, period_filter: str) -> ProjectReport:
        """Full dashboard report for the current window."""
        now = utc_now()
        events = await self._window_events(project_id, current_period(period_filter, now))
        report = self._report(events)

        logger.info(
            "Generated report",
            project_id=str(project_id),
            filter=period_filter,
            events=len(events),
            sessions=report.total_sessions,
        )
        return report

    async def get_comparison(self, project_id: UUID, period_filter: str) -> ComparisonReport:
        """Current and previous window reports plus the current trend line."""
        now = utc_now()
        current_events = await self._window_events(
            project_id, current_period(period_filter, now)
        )
        previous_events = await self._window_events(
            project_id, previous_period(period_filter, now)
        )

        logger.info(
            "Generated comparison report",
            project_id=str(project_id),
            filter=period_filter,
            current_events=len(current_events),
            previous_events=len(previous_events),
        )
        return ComparisonReport(
            current=self._report(current_events),
            previous=self._report(previous_events),
            time_series=generate_time_series(current_events, period_filter),
        )

    async def get_time_series(
        self,
        project_id: UUID,
        period_filter: str,
    ) -> list[TimeSeriesPoint]:
        now = utc_now()
        events = await self._window_events(project_id, current_period(period_filter, now))
        return generate_time_series(events, period_filter)

    async def get_contribution_calendar(self, project_id: UUID) -> ContributionCalendar:
        now = utc_now()
        window = (now - timedelta(days=CALENDAR_DAYS), now)
        events = await self._window_events(project_id, window)
        return generate_contribution_calendar(events, now)

    async def analyze_funnel(
        self,
        project_id: UUID,
        funnel_id: UUID,
        period_filter: str,
    ) -> FunnelAnalysis:
        """
        Run a funnel over the current window.

        Raises:
            FunnelNotFoundError: If the funnel does not belong to the project
        """
        funnel = await self.funnels.get_with_steps(funnel_id, project_id)
        if funnel is None:
            logger.warning(
                "Funnel not found",
                project_id=str(project_id),
                funnel_id=str(funnel_id),
            )
            raise FunnelNotFoundError(funnel_id, project_id)

        now = utc_now()
        events = await self._window_events(project_id, current_period(period_filter, now))
        analysis = funnel_analyzer.analyze_funnel(funnel, events)

        logger.info(
            "Analyzed funnel",
            project_id=str(project_id),
            funnel_id=str(funnel_id),
            filter=period_filter,
            sessions=analysis.total_sessions,
            steps=len(analysis.steps),
        )
        return analysis

    async def get_goal_stats(self, project_id: UUID, period_filter: str) -> list[GoalStats]:
        goals = await self.goals.list_active(project_id)
        if not goals:
            return []

        now = utc_now()
        current_events = await self._window_events(
            project_id, current_period(period_filter, now)
        )
        previous_events = await self._window_events(
            project_id, previous_period(period_filter, now)
        )

        stats = calculate_goal_stats(goals, current_events, previous_events)
        logger.info(
            "Calculated goal stats",
            project_id=str(project_id),
            filter=period_filter,
            goals=len(stats),
        )
        return stats

    async def analyze_segment(
        self,
        project_id: UUID,
        segment_id: UUID,
        period_filter: str,
    ) -> SegmentAnalysis:
        """
        Apply a saved segment to the current window.

        Raises:
            SegmentNotFoundError: If the segment does not belong to the project
        """
        segment = await self.segments.get_for_project(segment_id, project_id)
        if segment is None:
            logger.warning(
                "Segment not found",
                project_id=str(project_id),
                segment_id=str(segment_id),
            )
            raise SegmentNotFoundError(segment_id, project_id)

        now = utc_now()
        events = await self._window_events(project_id, current_period(period_filter, now))
        analysis = segment_filter.analyze_segment(
            segment, events, limit=self.settings.breakdown_limit
        )

        logger.info(
            "Analyzed segment",
            project_id=str(project_id),
            segment_id=str(segment_id),
            filter=period_filter,
            matching_events=analysis.matching_events,
        )
        return analysis

    async def get_revenue(self, project_id: UUID, period_filter: str) -> RevenueStats:
        now = utc_now()
        current_events = await self._window_events(
            project_id, current_period(period_filter, now)
        )
        previous_events = await self._window_events(
            project_id, previous_period(period_filter, now)
        )
        return calculate_revenue(current_events, previous_events)

    async def get_revenue_by_event(
        self,
        project_id: UUID,
        period_filter: str,
    ) -> list[RevenueByEvent]:
        now = utc_now()
        events = await self._window_events(project_id, current_period(period_filter, now))
        return calculate_revenue_by_event(events, limit=self.settings.revenue_list_limit)

    async def get_revenue_attribution(
        self,
        project_id: UUID,
        period_filter: str,
    ) -> list[RevenueAttribution]:
        now = utc_now()
        events = await self._window_events(project_id, current_period(period_filter, now))
        return calculate_revenue_attribution(events, limit=self.settings.revenue_list_limit)


async def get_analytics_service(session: DbSession) -> AnalyticsService:
    """FastAPI dependency providing an AnalyticsService bound to the request session."""
    return AnalyticsService(session)
