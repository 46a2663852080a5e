"""
Tests for session reconstruction and report generation.
"""
import pytest

from quietstats.models.event import EventType
from quietstats.services.report_generator import (
    analyze_peak_times,
    breakdown,
    generate_activity_heatmap,
    generate_report,
    last_visits,
    region_breakdown,
    scroll_depth_distribution,
    target_url_breakdown,
)
from quietstats.services.sessions import (
    bounce_rate,
    entry_page,
    estimated_duration,
    exit_page,
    group_sessions,
    is_bounce,
)

HOUR = 3600
DAY = 24 * HOUR


class TestSessions:
    """Tests for session grouping and bounce detection."""

    def test_group_sessions_sorts_chronologically(self, make_event):
        late = make_event(path="/late", at=60)
        early = make_event(path="/early", at=0)
        other = make_event(session="s2")

        sessions = group_sessions([late, other, early])

        assert list(sessions) == ["s1", "s2"]
        assert [e.path for e in sessions["s1"]] == ["/early", "/late"]

    def test_group_sessions_keeps_order_of_ties(self, make_event):
        first = make_event(path="/first")
        second = make_event(path="/second")

        sessions = group_sessions([first, second])

        assert [e.path for e in sessions["s1"]] == ["/first", "/second"]

    def test_single_pageview_bounces(self, make_event):
        assert is_bounce([make_event()])

    def test_repeated_path_still_bounces(self, make_event):
        assert is_bounce([make_event(path="/"), make_event(path="/", at=10)])

    def test_two_paths_do_not_bounce(self, make_event):
        assert not is_bounce([make_event(path="/"), make_event(path="/pricing", at=10)])

    def test_heartbeat_prevents_bounce(self, make_event):
        events = [make_event(), make_event(EventType.HEARTBEAT, at=30)]

        assert not is_bounce(events)

    def test_session_without_pageview_does_not_bounce(self, make_event):
        events = [make_event(EventType.CUSTOM, event_name="signup")]

        assert not is_bounce(events)
        assert entry_page(events) is None
        assert exit_page(events) is None

    def test_bounce_rate_single_session(self, make_event):
        sessions = group_sessions([make_event()])

        assert bounce_rate(sessions) == 100.0

    def test_bounce_rate_one_of_three(self, make_event):
        events = [
            make_event(session="a", path="/"),
            make_event(session="b", path="/", at=1),
            make_event(session="b", path="/about", at=2),
            make_event(session="c", path="/blog", at=3),
            make_event(session="c", path="/blog/post", at=4),
        ]

        assert bounce_rate(group_sessions(events)) == pytest.approx(33.333, rel=1e-3)

    def test_bounce_rate_without_sessions(self):
        assert bounce_rate({}) == 0.0

    def test_entry_and_exit_pages(self, make_event):
        events = [
            make_event(path="/landing", at=0),
            make_event(EventType.SCROLL, path="/landing", scroll_depth=50, at=5),
            make_event(path="/checkout", at=10),
        ]

        assert entry_page(events) == "/landing"
        assert exit_page(events) == "/checkout"

    def test_estimated_duration_counts_heartbeats(self, make_event):
        events = [make_event()] + [
            make_event(EventType.HEARTBEAT, at=30 * i) for i in range(1, 4)
        ]

        assert estimated_duration(events, heartbeat_interval=30) == 90


class TestBreakdowns:
    """Tests for per-dimension breakdowns."""

    @pytest.fixture
    def events(self, make_event):
        browsers = ["Chrome", "Firefox", "Chrome", None, "Safari", "Chrome", "Firefox"]
        return [
            make_event(session=f"s{i}", browser=browser, at=i)
            for i, browser in enumerate(browsers)
        ]

    def test_sorted_by_count_with_unknown_label(self, events):
        entries = breakdown(events, "browser")

        assert [(e.label, e.value) for e in entries] == [
            ("Chrome", 3),
            ("Firefox", 2),
            ("Unknown", 1),
            ("Safari", 1),
        ]

    def test_limit(self, events):
        assert len(breakdown(events, "browser", limit=2)) == 2

    def test_counts_never_exceed_total(self, events):
        entries = breakdown(events, "browser")
        values = [e.value for e in entries]

        assert sum(values) <= len(events)
        assert values == sorted(values, reverse=True)

    def test_callable_dimension(self, events):
        entries = breakdown(events, lambda e: e.session_id[:1])

        assert entries[0].label == "s"
        assert entries[0].value == len(events)

    def test_region_breakdown_drops_unknown_regions(self, make_event):
        events = [
            make_event(country="Germany", region="Bavaria"),
            make_event(country="Germany", region="Bavaria"),
            make_event(country=None, region="Tyrol"),
            make_event(country="France", region=None),
            make_event(country="Spain", region="Unknown"),
        ]

        entries = region_breakdown(events)

        assert [(e.label, e.value) for e in entries] == [
            ("Bavaria, Germany", 2),
            ("Tyrol, Unknown", 1),
        ]

    def test_scroll_depth_distribution_ascending(self, make_event):
        events = [
            make_event(EventType.SCROLL, scroll_depth=75),
            make_event(EventType.SCROLL, scroll_depth=25),
            make_event(EventType.SCROLL, scroll_depth=75),
            make_event(EventType.PAGEVIEW, scroll_depth=100),
        ]

        entries = scroll_depth_distribution(events)

        assert [(e.label, e.value) for e in entries] == [("25%", 1), ("75%", 2)]

    def test_target_url_breakdown_filters_by_type(self, make_event):
        events = [
            make_event(EventType.OUTBOUND, target_url="https://github.com"),
            make_event(EventType.OUTBOUND, target_url="https://github.com"),
            make_event(EventType.DOWNLOAD, target_url="https://example.com/a.pdf"),
        ]

        outbound = target_url_breakdown(events, EventType.OUTBOUND)
        downloads = target_url_breakdown(events, EventType.DOWNLOAD)

        assert [(e.label, e.value) for e in outbound] == [("https://github.com", 2)]
        assert [e.label for e in downloads] == ["https://example.com/a.pdf"]

    def test_last_visits_most_recent_first(self, make_event):
        events = [make_event(path=f"/p{i}", at=i, city="Berlin") for i in range(5)]

        visits = last_visits(events, limit=3)

        assert [v.path for v in visits] == ["/p4", "/p3", "/p2"]
        assert visits[0].city == "Berlin"


class TestPeakTimes:
    """Tests for the activity heatmap and peak-time analysis."""

    def test_heatmap_uses_sunday_as_day_zero(self, make_event):
        # NOW is a Wednesday at 12:00
        cells = generate_activity_heatmap([make_event(), make_event(at=-3 * DAY)])

        assert [(c.day_of_week, c.hour_of_day, c.count) for c in cells] == [
            (0, 12, 1),
            (3, 12, 1),
        ]

    def test_peak_cell_can_disagree_with_aggregates(self, make_event):
        monday_10 = -2 * DAY - 2 * HOUR
        tuesday_11 = -1 * DAY - 1 * HOUR
        wednesday_11 = -1 * HOUR
        events = (
            [make_event(at=monday_10 + i) for i in range(5)]
            + [make_event(at=tuesday_11 + i) for i in range(3)]
            + [make_event(at=wednesday_11 + i) for i in range(3)]
        )

        peaks = analyze_peak_times(generate_activity_heatmap(events))

        assert peaks.top_hours[0].label == "11:00"
        assert peaks.top_hours[0].value == 6
        assert peaks.peak_hour == 10
        assert peaks.peak_day == 1
        assert [d.label for d in peaks.top_days] == ["Monday", "Tuesday", "Wednesday"]

    def test_empty_heatmap(self):
        peaks = analyze_peak_times([])

        assert peaks.top_hours == []
        assert peaks.top_days == []
        assert peaks.peak_hour == 0
        assert peaks.peak_day == 0


class TestGenerateReport:
    """Tests for the assembled report."""

    @pytest.fixture
    def events(self, make_event):
        return [
            make_event(session="a", path="/", browser="Chrome", utm_source="newsletter", at=0),
            make_event(session="a", path="/pricing", browser="Chrome", at=10),
            make_event(EventType.HEARTBEAT, session="a", path="/pricing", at=40),
            make_event(EventType.HEARTBEAT, session="a", path="/pricing", at=70),
            make_event(EventType.CUSTOM, session="a", path="/pricing", event_name="signup", at=80),
            make_event(session="b", path="/blog", browser="Firefox", at=100),
            make_event(session="c", visitor="v-a", path="/", at=200),
        ]

    def test_totals(self, events):
        report = generate_report(events)

        assert report.total_views == 7
        assert report.unique_visitors == 2
        assert report.total_sessions == 3

    def test_session_metrics(self, events):
        report = generate_report(events, heartbeat_interval=30)

        assert report.bounce_rate == pytest.approx(66.667, rel=1e-3)
        assert report.avg_session_duration == pytest.approx(20.0)
        assert report.conversion_rate == pytest.approx(33.333, rel=1e-3)
        assert {e.label: e.value for e in report.entry_pages} == {"/": 2, "/blog": 1}
        assert {e.label: e.value for e in report.exit_pages} == {"/pricing": 1, "/blog": 1, "/": 1}

    def test_utm_breakdowns_exclude_unknown(self, events):
        report = generate_report(events)

        assert [(e.label, e.value) for e in report.utm_sources] == [("newsletter", 1)]
        assert report.utm_mediums == []
        assert report.utm_campaigns == []

    def test_custom_events(self, events):
        report = generate_report(events)

        assert [(e.label, e.value) for e in report.custom_events] == [("signup", 1)]

    def test_serializes_with_camel_case_keys(self, events):
        data = generate_report(events).model_dump(by_alias=True)

        assert data["totalViews"] == 7
        assert "peakTimeAnalysis" in data
        assert "scrollDepthDistribution" in data

    def test_empty_window(self):
        report = generate_report([])

        assert report.total_views == 0
        assert report.bounce_rate == 0.0
        assert report.avg_session_duration == 0.0
        assert report.conversion_rate == 0.0
        assert report.top_pages == []
