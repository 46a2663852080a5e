"""
Funnel and goal Pydantic schemas.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FunnelStepResponse(BaseModel):
    """Funnel step definition."""

    id: str
    step_number: int = Field(alias="stepNumber")
    name: str
    step_type: str = Field(alias="stepType")
    match_value: str = Field(alias="matchValue")

    model_config = ConfigDict(populate_by_name=True)


class FunnelResponse(BaseModel):
    """Funnel definition with its ordered steps."""

    id: str
    name: str
    steps: list[FunnelStepResponse]
    created_at: str = Field(alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)


class FunnelStepAnalysis(BaseModel):
    """How many sessions reached a step and how long they took."""

    step_number: int = Field(alias="stepNumber")
    name: str
    sessions: int
    conversion_rate: float = Field(alias="conversionRate")
    drop_off_rate: float = Field(alias="dropOffRate")
    avg_time_from_previous: Optional[float] = Field(None, alias="avgTimeFromPrevious")

    model_config = ConfigDict(populate_by_name=True)


class FunnelAnalysis(BaseModel):
    """Per-step funnel results for one window."""

    funnel: FunnelResponse
    total_sessions: int = Field(alias="totalSessions")
    steps: list[FunnelStepAnalysis]

    model_config = ConfigDict(populate_by_name=True)


class GoalResponse(BaseModel):
    """Conversion goal definition."""

    id: str
    name: str
    goal_type: str = Field(alias="goalType")
    match_value: str = Field(alias="matchValue")
    is_active: bool = Field(alias="isActive")
    created_at: str = Field(alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)


class GoalStats(BaseModel):
    """Goal conversions for the current and the previous period."""

    goal: GoalResponse
    conversions: int
    conversion_rate: float = Field(alias="conversionRate")
    previous_conversions: int = Field(alias="previousConversions")
    previous_conversion_rate: float = Field(alias="previousConversionRate")

    model_config = ConfigDict(populate_by_name=True)
