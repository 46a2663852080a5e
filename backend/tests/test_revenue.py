"""
Tests for revenue extraction, totals and attribution.
"""
import pytest

from quietstats.models.event import EventType
from quietstats.services.revenue_analyzer import (
    PatternRevenueExtractor,
    calculate_revenue,
    calculate_revenue_attribution,
    calculate_revenue_by_event,
    first_touch_source,
)


@pytest.fixture
def purchase(make_event):
    def factory(properties, *, session="s1", name="purchase", at=0):
        return make_event(
            EventType.CUSTOM,
            session=session,
            event_name=name,
            properties=properties,
            at=at,
        )

    return factory


class TestPatternRevenueExtractor:
    """Tests for best-effort revenue extraction."""

    @pytest.fixture
    def extractor(self):
        return PatternRevenueExtractor()

    @pytest.mark.parametrize(
        "properties,expected",
        [
            ('{"revenue":29.99}', 29.99),
            ('{"revenue":"29.99"}', 29.99),
            ('{"revenue": 15}', 15.0),
            ('{"plan":"pro","revenue" : "120"}', 120.0),
        ],
    )
    def test_extracts_value(self, extractor, properties, expected):
        assert extractor.extract(properties) == expected

    @pytest.mark.parametrize(
        "properties",
        [None, "", "   ", '{"amount":10}', '{"revenue":"free"}', '{"revenue":-5}'],
    )
    def test_non_matching_properties(self, extractor, properties):
        assert extractor.extract(properties) is None


class TestCalculateRevenue:
    def test_totals(self, make_event, purchase):
        current = [
            make_event(session="s1", visitor="v1"),
            make_event(session="s2", visitor="v2"),
            purchase('{"revenue":"29.99"}', session="s1"),
            purchase('{"revenue":15}', session="s2"),
            purchase('{"note":"no value"}', session="s2"),
        ]

        stats = calculate_revenue(current, [])

        assert stats.total_revenue == pytest.approx(44.99)
        assert stats.transactions == 2
        assert stats.average_order_value == pytest.approx(22.495)
        assert stats.revenue_per_visitor == pytest.approx(22.495)
        assert stats.previous_revenue == 0.0
        assert stats.previous_transactions == 0
        assert stats.previous_average_order_value == 0.0
        assert stats.previous_revenue_per_visitor == 0.0

    def test_only_custom_events_count(self, make_event):
        events = [make_event(properties='{"revenue":100}')]

        stats = calculate_revenue(events, events)

        assert stats.total_revenue == 0.0
        assert stats.transactions == 0

    def test_previous_period(self, make_event, purchase):
        previous = [make_event(visitor="v1"), purchase('{"revenue":10}')]

        stats = calculate_revenue([], previous)

        assert stats.total_revenue == 0.0
        assert stats.previous_revenue == 10.0
        assert stats.previous_transactions == 1
        assert stats.previous_revenue_per_visitor == 10.0

    def test_revenue_without_pageview_visitors(self, purchase):
        stats = calculate_revenue([purchase('{"revenue":10}')], [])

        assert stats.total_revenue == 10.0
        assert stats.revenue_per_visitor == 0.0


class TestRevenueByEvent:
    def test_grouped_and_sorted(self, purchase):
        events = [
            purchase('{"revenue":10}', name="upgrade"),
            purchase('{"revenue":30}', name="purchase"),
            purchase('{"revenue":20}', name="purchase"),
            purchase('{"revenue":5}', name=None),
        ]

        rows = calculate_revenue_by_event(events)

        assert [(r.event_name, r.revenue, r.transactions) for r in rows] == [
            ("purchase", 50.0, 2),
            ("upgrade", 10.0, 1),
        ]
        assert rows[0].avg_value == 25.0

    def test_limit(self, purchase):
        events = [purchase('{"revenue":1}', name=f"e{i}") for i in range(30)]

        assert len(calculate_revenue_by_event(events)) == 20
        assert len(calculate_revenue_by_event(events, limit=5)) == 5


class TestRevenueAttribution:
    """Tests for first-touch attribution."""

    def test_source_priority(self, make_event):
        assert first_touch_source(None) == "Direct"
        assert first_touch_source(make_event()) == "Direct"
        assert first_touch_source(
            make_event(utm_campaign="spring", utm_source="google", referrer="https://x.com")
        ) == "utm:spring"
        assert first_touch_source(
            make_event(utm_source="google", referrer="https://x.com")
        ) == "utm:google"
        assert first_touch_source(
            make_event(referrer="https://www.example.com/page?q=1")
        ) == "example.com"
        assert first_touch_source(make_event(referrer="not a url")) == "not a url"

    def test_blank_sources_fall_through(self, make_event):
        assert first_touch_source(
            make_event(utm_campaign="  ", referrer="https://www.x.com/a")
        ) == "x.com"
        assert first_touch_source(
            make_event(utm_campaign="", utm_source=" \t", referrer="https://x.com")
        ) == "x.com"
        assert first_touch_source(make_event(referrer="   ")) == "Direct"
        assert first_touch_source(
            make_event(utm_campaign=" ", utm_source=" ", referrer=" ")
        ) == "Direct"

    def test_attribution(self, make_event, purchase):
        events = [
            make_event(session="s1", utm_campaign="spring", utm_source="google"),
            purchase('{"revenue":50}', session="s1", at=10),
            make_event(session="s2", referrer="https://www.news.ycombinator.com/item?id=1"),
            purchase('{"revenue":20}', session="s2", at=10),
            make_event(session="s3", referrer="https://news.ycombinator.com/"),
            make_event(session="s4"),
            purchase('{"revenue":10}', session="s4", at=10),
            make_event(session="s6", utm_source="twitter"),
            purchase('{"revenue":"7.5"}', session="s6", at=10),
        ]

        rows = calculate_revenue_attribution(events)

        assert [(r.source, r.revenue, r.transactions, r.conversion_rate) for r in rows] == [
            ("utm:spring", 50.0, 1, 100.0),
            ("news.ycombinator.com", 20.0, 1, 50.0),
            ("Direct", 10.0, 1, 100.0),
            ("utm:twitter", 7.5, 1, 100.0),
        ]

    def test_first_pageview_decides_source(self, make_event, purchase):
        events = [
            make_event(path="/", referrer="https://google.com", at=0),
            make_event(path="/pricing", utm_campaign="retarget", at=10),
            purchase('{"revenue":99}', at=20),
        ]

        rows = calculate_revenue_attribution(events)

        assert [r.source for r in rows] == ["google.com"]

    def test_session_without_pageview_is_direct(self, purchase):
        rows = calculate_revenue_attribution([purchase('{"revenue":5}', session="s5")])

        assert len(rows) == 1
        assert rows[0].source == "Direct"
        assert rows[0].conversion_rate == 0.0

    def test_no_revenue(self, make_event):
        assert calculate_revenue_attribution([make_event()]) == []
