"""
Revenue Pydantic schemas.
"""
from pydantic import BaseModel, ConfigDict, Field


class RevenueStats(BaseModel):
    """Revenue totals for a window and the equal-length window before it."""

    total_revenue: float = Field(alias="totalRevenue")
    transactions: int
    average_order_value: float = Field(alias="averageOrderValue")
    revenue_per_visitor: float = Field(alias="revenuePerVisitor")
    previous_revenue: float = Field(0.0, alias="previousRevenue")
    previous_transactions: int = Field(0, alias="previousTransactions")
    previous_average_order_value: float = Field(0.0, alias="previousAverageOrderValue")
    previous_revenue_per_visitor: float = Field(0.0, alias="previousRevenuePerVisitor")

    model_config = ConfigDict(populate_by_name=True)


class RevenueByEvent(BaseModel):
    """Revenue generated by one custom event name."""

    event_name: str = Field(alias="eventName")
    revenue: float
    transactions: int
    avg_value: float = Field(alias="avgValue")

    model_config = ConfigDict(populate_by_name=True)


class RevenueAttribution(BaseModel):
    """Revenue credited to a first-touch traffic source."""

    source: str
    revenue: float
    transactions: int
    avg_value: float = Field(alias="avgValue")
    conversion_rate: float = Field(alias="conversionRate")

    model_config = ConfigDict(populate_by_name=True)
