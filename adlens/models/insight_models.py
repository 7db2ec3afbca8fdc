"""ADLENS — Insight Value Models.

Date ranges, normalized metric bundles, period comparisons and per-item
batch outcomes. Everything here is computed fresh per request.
"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, model_validator


class DateRange(BaseModel):
    """Inclusive calendar interval."""

    since: date
    until: date

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if self.since > self.until:
            raise ValueError(
                f"since ({self.since.isoformat()}) is after until ({self.until.isoformat()})"
            )
        return self

    @property
    def days(self) -> int:
        return (self.until - self.since).days + 1

    @property
    def label(self) -> str:
        return f"{self.since.isoformat()} → {self.until.isoformat()}"

    def as_param(self) -> dict[str, str]:
        """Shape expected by the Graph API ``time_range`` parameter."""
        return {"since": self.since.isoformat(), "until": self.until.isoformat()}


class DerivedMetrics(BaseModel):
    """Normalized, rounded metric bundle computed from one raw insight row."""

    spend: float = 0.0
    impressions: int = 0
    clicks: int = 0
    reach: int = 0
    frequency: float = 0.0
    ctr: float = 0.0
    cpc: float = 0.0
    cpm: float = 0.0
    unique_clicks: int = 0
    purchases: int = 0
    revenue: float = 0.0
    roas: float = 0.0
    cpa: float = 0.0
    add_to_carts: int = 0
    cost_per_atc: float = 0.0
    initiate_checkouts: int = 0
    view_contents: int = 0
    leads: int = 0

    def value(self, metric_name: str) -> float:
        """Numeric value of a metric by name, ``0`` for unknown names."""
        return getattr(self, metric_name, 0) or 0


class EntityMetrics(DerivedMetrics):
    """Derived metrics for one campaign / ad set / ad."""

    entity_id: str = ""
    entity_name: str = ""
    vs_previous: Optional[dict[str, "ComparisonResult"]] = None


class DailyMetrics(DerivedMetrics):
    """Derived metrics for one day of a daily series."""

    date: str = ""


class ComparisonResult(BaseModel):
    """Period-over-period change for one metric."""

    delta: str
    pct: str


class FetchOutcome(BaseModel):
    """Per-item result of a batch fetch: either ``data`` or ``error``."""

    id: str
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def rows(self) -> list:
        """Result rows of a ``{"data": [...]}`` payload, else empty."""
        if isinstance(self.data, dict) and isinstance(self.data.get("data"), list):
            return self.data["data"]
        return []


EntityMetrics.model_rebuild()
