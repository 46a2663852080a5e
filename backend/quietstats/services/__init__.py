"""
Services package for the analytics engine.

The engine modules are pure functions over already-fetched events;
AnalyticsService wires them to storage.
"""
from quietstats.services.analytics_service import AnalyticsService, get_analytics_service
from quietstats.services.revenue_analyzer import PatternRevenueExtractor, RevenueExtractor

__all__ = [
    "AnalyticsService",
    "get_analytics_service",
    "RevenueExtractor",
    "PatternRevenueExtractor",
]
