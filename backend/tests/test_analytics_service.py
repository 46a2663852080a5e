"""
Tests for AnalyticsService wiring between repositories and the engine.
"""
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from quietstats.core.config import Settings
from quietstats.core.exceptions import FunnelNotFoundError, SegmentNotFoundError
from quietstats.models.event import EventType
from quietstats.models.funnel import Funnel, FunnelStep
from quietstats.models.goal import ConversionGoal
from quietstats.models.segment import Segment
from quietstats.services.analytics_service import AnalyticsService


class TestAnalyticsService:
    """Tests for AnalyticsService."""

    @pytest.fixture(autouse=True)
    def frozen_now(self, now):
        with patch("quietstats.services.analytics_service.utc_now", return_value=now):
            yield

    @pytest.fixture
    def window_events(self, make_event):
        return [
            make_event(session="a", path="/cart", at=-100),
            make_event(EventType.CUSTOM, session="a", event_name="purchase",
                       properties='{"revenue":20}', at=-50),
            make_event(session="b", path="/", at=-10),
        ]

    @pytest.fixture
    def service(self, window_events):
        service = AnalyticsService(AsyncMock(), settings=Settings(breakdown_limit=5))
        service.events = MagicMock()
        service.events.list_for_window = AsyncMock(return_value=window_events)
        service.funnels = MagicMock()
        service.goals = MagicMock()
        service.segments = MagicMock()
        return service

    async def test_report_reads_current_window(self, service, project_id, now):
        report = await service.get_report(project_id, "24h")

        assert report.total_views == 3
        service.events.list_for_window.assert_awaited_once_with(
            project_id, now - timedelta(hours=24), now
        )

    async def test_unknown_filter_reads_seven_days(self, service, project_id, now):
        await service.get_report(project_id, "quarter")

        _, start, end = service.events.list_for_window.await_args.args
        assert end - start == timedelta(days=7)

    async def test_comparison_reads_both_windows(self, service, project_id, now):
        comparison = await service.get_comparison(project_id, "7d")

        first, second = service.events.list_for_window.await_args_list
        assert first.args[1:] == (now - timedelta(days=7), now)
        assert second.args[1:] == (now - timedelta(days=14), now - timedelta(days=7))
        assert comparison.current.total_views == 3
        assert comparison.time_series

    async def test_calendar_reads_a_year(self, service, project_id, now):
        calendar = await service.get_contribution_calendar(project_id)

        _, start, end = service.events.list_for_window.await_args.args
        assert end - start == timedelta(days=365)
        assert calendar.end_date == now.date().isoformat()

    async def test_funnel_not_found(self, service, project_id):
        service.funnels.get_with_steps = AsyncMock(return_value=None)

        with pytest.raises(FunnelNotFoundError) as exc_info:
            await service.analyze_funnel(project_id, uuid4(), "7d")

        assert exc_info.value.project_id == str(project_id)
        service.events.list_for_window.assert_not_awaited()

    async def test_funnel_analysis(self, service, project_id):
        funnel = Funnel(id=uuid4(), name="Buy", steps=[
            FunnelStep(id=uuid4(), step_number=1, name="Cart", step_type="url", match_value="/cart"),
            FunnelStep(id=uuid4(), step_number=2, name="Buy", step_type="event", match_value="purchase"),
        ])
        service.funnels.get_with_steps = AsyncMock(return_value=funnel)

        analysis = await service.analyze_funnel(project_id, funnel.id, "7d")

        service.funnels.get_with_steps.assert_awaited_once_with(funnel.id, project_id)
        assert analysis.total_sessions == 2
        assert [s.sessions for s in analysis.steps] == [1, 1]

    async def test_goal_stats_without_goals_skip_events(self, service, project_id):
        service.goals.list_active = AsyncMock(return_value=[])

        assert await service.get_goal_stats(project_id, "7d") == []
        service.events.list_for_window.assert_not_awaited()

    async def test_goal_stats(self, service, project_id):
        goal = ConversionGoal(
            id=uuid4(), name="Cart", goal_type="url", match_value="/cart", is_active=True
        )
        service.goals.list_active = AsyncMock(return_value=[goal])

        stats = await service.get_goal_stats(project_id, "7d")

        assert stats[0].conversions == 1
        assert stats[0].conversion_rate == 50.0
        assert service.events.list_for_window.await_count == 2

    async def test_segment_not_found(self, service, project_id):
        service.segments.get_for_project = AsyncMock(return_value=None)

        with pytest.raises(SegmentNotFoundError):
            await service.analyze_segment(project_id, uuid4(), "7d")

    async def test_segment_analysis(self, service, project_id):
        segment = Segment(
            id=uuid4(),
            name="Cart visitors",
            filters_json='[{"field": "path", "operator": "equals", "value": "/cart"}]',
        )
        service.segments.get_for_project = AsyncMock(return_value=segment)

        analysis = await service.analyze_segment(project_id, segment.id, "7d")

        assert analysis.matching_events == 1

    async def test_revenue(self, service, project_id):
        stats = await service.get_revenue(project_id, "7d")

        assert stats.total_revenue == 20.0
        assert stats.previous_revenue == 20.0
        assert service.events.list_for_window.await_count == 2

    async def test_revenue_lists(self, service, project_id):
        by_event = await service.get_revenue_by_event(project_id, "7d")
        attribution = await service.get_revenue_attribution(project_id, "7d")

        assert [r.event_name for r in by_event] == ["purchase"]
        assert [r.source for r in attribution] == ["Direct"]
