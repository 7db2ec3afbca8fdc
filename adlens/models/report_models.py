"""ADLENS — Report Output Models."""

from typing import Dict, List, Optional

from pydantic import BaseModel

from adlens.models.insight_models import (
    ComparisonResult,
    DailyMetrics,
    DateRange,
    DerivedMetrics,
    EntityMetrics,
)


class PeriodSnapshot(DerivedMetrics):
    """Aggregate metrics for one period, labelled with its range."""

    range: str = ""


class PeriodComparison(BaseModel):
    """Account-level current vs previous period."""

    this_period: PeriodSnapshot
    previous_period: PeriodSnapshot
    changes: Dict[str, ComparisonResult] = {}


class Report(BaseModel):
    """Multi-section performance report, built once per request."""

    period: str
    date_range: DateRange
    previous_range: Optional[DateRange] = None
    generated_at: str = ""
    level: str = "campaign"
    account_summary: Optional[DerivedMetrics] = None
    daily_breakdown: List[DailyMetrics] = []
    period_comparison: Optional[PeriodComparison] = None
    by_entity: List[EntityMetrics] = []
