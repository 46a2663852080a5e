"""
Report Pydantic schemas for dashboard analytics data.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class StatEntry(BaseModel):
    """A single labelled count in a breakdown."""

    label: str
    value: int


class VisitSnippet(BaseModel):
    """Compact view of a recent visit."""

    path: str
    timestamp: str
    city: Optional[str] = None
    country: Optional[str] = None


class ActivityCell(BaseModel):
    """Event count for one (day of week, hour of day) heatmap cell."""

    day_of_week: int = Field(alias="dayOfWeek", ge=0, le=6)  # 0=Sunday
    hour_of_day: int = Field(alias="hourOfDay", ge=0, le=23)
    count: int

    model_config = ConfigDict(populate_by_name=True)


class PeakTimeAnalysis(BaseModel):
    """Busiest hours and days derived from the activity heatmap."""

    top_hours: list[StatEntry] = Field(alias="topHours")
    top_days: list[StatEntry] = Field(alias="topDays")
    peak_hour: int = Field(alias="peakHour")
    peak_day: int = Field(alias="peakDay")

    model_config = ConfigDict(populate_by_name=True)


class TimeSeriesPoint(BaseModel):
    """Views and distinct visitors in one time bucket."""

    timestamp: str
    views: int
    unique_visitors: int = Field(alias="uniqueVisitors")

    model_config = ConfigDict(populate_by_name=True)


class ProjectReport(BaseModel):
    """Complete report for one project and window."""

    total_views: int = Field(alias="totalViews")
    unique_visitors: int = Field(alias="uniqueVisitors")
    top_pages: list[StatEntry] = Field(alias="topPages")
    browsers: list[StatEntry]
    oss: list[StatEntry]
    devices: list[StatEntry]
    referrers: list[StatEntry]
    countries: list[StatEntry]
    custom_events: list[StatEntry] = Field(alias="customEvents")
    last_visits: list[VisitSnippet] = Field(alias="lastVisits")
    activity_heatmap: list[ActivityCell] = Field(alias="activityHeatmap")
    peak_time_analysis: PeakTimeAnalysis = Field(alias="peakTimeAnalysis")
    bounce_rate: float = Field(alias="bounceRate")
    utm_sources: list[StatEntry] = Field(alias="utmSources")
    utm_mediums: list[StatEntry] = Field(alias="utmMediums")
    utm_campaigns: list[StatEntry] = Field(alias="utmCampaigns")
    scroll_depth_distribution: list[StatEntry] = Field(alias="scrollDepthDistribution")
    total_sessions: int = Field(alias="totalSessions")
    avg_session_duration: float = Field(alias="avgSessionDuration")
    entry_pages: list[StatEntry] = Field(alias="entryPages")
    exit_pages: list[StatEntry] = Field(alias="exitPages")
    outbound_links: list[StatEntry] = Field(alias="outboundLinks")
    file_downloads: list[StatEntry] = Field(alias="fileDownloads")
    regions: list[StatEntry]
    conversion_rate: float = Field(alias="conversionRate")

    model_config = ConfigDict(populate_by_name=True)


class ComparisonReport(BaseModel):
    """Current period, previous period and the current trend line."""

    current: ProjectReport
    previous: ProjectReport
    time_series: list[TimeSeriesPoint] = Field(alias="timeSeries")

    model_config = ConfigDict(populate_by_name=True)


class ContributionDay(BaseModel):
    """One square of the contribution calendar."""

    date: str
    visits: int
    unique_visitors: int = Field(alias="uniqueVisitors")
    level: int = Field(ge=0, le=4)

    model_config = ConfigDict(populate_by_name=True)


class ContributionCalendar(BaseModel):
    """Year of daily traffic with quartile-relative intensity levels."""

    days: list[ContributionDay]
    max_visits: int = Field(alias="maxVisits")
    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")

    model_config = ConfigDict(populate_by_name=True)
