"""ADLENS — Unified Metric Registry.

Defines the canonical derived metrics, their classifications, the action
types they are extracted from, and the metric lists used for period
comparisons. Engines read from here so they treat metrics uniformly.
"""

from enum import Enum
from typing import Dict, Tuple


class MetricType(str, Enum):
    """How a metric is categorised."""

    VOLUME = "volume"  # Raw counts: impressions, clicks, reach
    COST = "cost"  # Monetary: spend
    REVENUE = "revenue"  # Income: purchase value
    RATE = "rate"  # Pre-computed rates from source: ctr, cpc
    DERIVED = "derived"  # Computed locally: roas, cpa
    CONVERSION = "conversion"  # Action counts: purchases, leads


class MetricDefinition:
    """Describes a single metric."""

    def __init__(
        self,
        name: str,
        metric_type: MetricType,
        unit: str = "",
        description: str = "",
        source_field: str = "",
    ):
        self.name = name
        self.metric_type = metric_type
        self.unit = unit
        self.description = description
        self.source_field = source_field or name

    @property
    def is_count(self) -> bool:
        return self.unit == "count"

    def __repr__(self) -> str:
        return f"<Metric {self.name} ({self.metric_type.value})>"


# ─────────────────────────────────────────────
# RAW METRICS — Parsed directly from insight row fields
# ─────────────────────────────────────────────

RAW_METRICS: Dict[str, MetricDefinition] = {
    "spend": MetricDefinition(
        "spend", MetricType.COST, "currency", "Total amount spent"
    ),
    "impressions": MetricDefinition(
        "impressions", MetricType.VOLUME, "count", "Number of times ad was shown"
    ),
    "clicks": MetricDefinition("clicks", MetricType.VOLUME, "count", "Total clicks"),
    "reach": MetricDefinition(
        "reach", MetricType.VOLUME, "count", "Unique users who saw ad"
    ),
    "unique_clicks": MetricDefinition(
        "unique_clicks", MetricType.VOLUME, "count", "Unique users who clicked"
    ),
    "frequency": MetricDefinition(
        "frequency", MetricType.VOLUME, "avg", "Average times ad shown per user"
    ),
    "ctr": MetricDefinition("ctr", MetricType.RATE, "%", "Click-through rate"),
    "cpc": MetricDefinition("cpc", MetricType.RATE, "currency", "Cost per click"),
    "cpm": MetricDefinition(
        "cpm", MetricType.RATE, "currency", "Cost per 1000 impressions"
    ),
}


# ─────────────────────────────────────────────
# ACTION METRICS — Extracted from actions / action_values by exact action_type
# ─────────────────────────────────────────────

ACTION_METRICS: Dict[str, MetricDefinition] = {
    "purchases": MetricDefinition(
        "purchases", MetricType.CONVERSION, "count", "Purchases", "purchase"
    ),
    "add_to_carts": MetricDefinition(
        "add_to_carts", MetricType.CONVERSION, "count", "Add to carts", "add_to_cart"
    ),
    "initiate_checkouts": MetricDefinition(
        "initiate_checkouts",
        MetricType.CONVERSION,
        "count",
        "Checkouts initiated",
        "initiate_checkout",
    ),
    "view_contents": MetricDefinition(
        "view_contents",
        MetricType.CONVERSION,
        "count",
        "Content views",
        "view_content",
    ),
    "leads": MetricDefinition("leads", MetricType.CONVERSION, "count", "Leads", "lead"),
}

ACTION_VALUE_METRICS: Dict[str, MetricDefinition] = {
    "revenue": MetricDefinition(
        "revenue",
        MetricType.REVENUE,
        "currency",
        "Total purchase conversion value",
        "purchase",
    ),
}


# ─────────────────────────────────────────────
# DERIVED METRICS — Ratios guarded against zero denominators
# ─────────────────────────────────────────────

# name → (numerator, denominator)
DERIVED_RATIOS: Dict[str, Tuple[str, str]] = {
    "roas": ("revenue", "spend"),
    "cpa": ("spend", "purchases"),
    "cost_per_atc": ("spend", "add_to_carts"),
}

DERIVED_METRICS: Dict[str, MetricDefinition] = {
    "roas": MetricDefinition("roas", MetricType.DERIVED, "ratio", "Return on ad spend"),
    "cpa": MetricDefinition(
        "cpa", MetricType.DERIVED, "currency", "Cost per acquisition"
    ),
    "cost_per_atc": MetricDefinition(
        "cost_per_atc", MetricType.DERIVED, "currency", "Cost per add to cart"
    ),
}


# ─────────────────────────────────────────────
# COMPARISONS & SIGNAL FILTERING
# ─────────────────────────────────────────────

# Account-level period comparison
COMPARISON_METRICS: Tuple[str, ...] = (
    "spend",
    "roas",
    "cpa",
    "impressions",
    "clicks",
    "purchases",
    "revenue",
    "ctr",
    "cpm",
    "reach",
    "frequency",
    "add_to_carts",
    "initiate_checkouts",
    "view_contents",
)

# Per-entity period comparison
ENTITY_COMPARISON_METRICS: Tuple[str, ...] = (
    "spend",
    "roas",
    "cpa",
    "purchases",
    "revenue",
    "ctr",
    "impressions",
)

# Attribution variants that duplicate the canonical action types
REDUNDANT_ACTION_PREFIXES: Tuple[str, ...] = (
    "omni_",
    "onsite_web_app_",
    "onsite_web_",
    "onsite_app_",
    "web_app_in_store_",
    "offsite_conversion.fb_pixel_",
)

ACTION_LIST_FIELDS: Tuple[str, ...] = (
    "actions",
    "action_values",
    "cost_per_action_type",
    "conversions",
)


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────

ALL_METRICS = {
    **RAW_METRICS,
    **ACTION_METRICS,
    **ACTION_VALUE_METRICS,
    **DERIVED_METRICS,
}


def get_metric(name: str) -> MetricDefinition | None:
    """Look up a metric by name."""
    return ALL_METRICS.get(name)
