"""ADLENS — Metric Normalizer.

Converts one raw insight row into a DerivedMetrics bundle: parsed numbers
defaulting to 0, named action counts and values, and zero-guarded ratios.
Total function: no input makes it raise.
"""

import math
from typing import Any, Dict, Iterable, List

from adlens.core.metric_registry import (
    ACTION_METRICS,
    ACTION_VALUE_METRICS,
    DERIVED_RATIOS,
    RAW_METRICS,
    get_metric,
)
from adlens.models.insight_models import DailyMetrics, DerivedMetrics, EntityMetrics


def _safe_float(value: Any) -> float:
    """Safely convert a value to a finite float, else 0."""
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return result if math.isfinite(result) else 0.0


def _safe_int(value: Any) -> int:
    """Integer parse: ``"12"`` → 12, ``"12.7"`` → 12, junk → 0."""
    if isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return int(_safe_float(value))


def _find_action(actions: Any, action_type: str) -> Any:
    """Value of the first entry whose action_type matches exactly."""
    if not isinstance(actions, list):
        return 0
    for action in actions:
        if isinstance(action, dict) and action.get("action_type") == action_type:
            return action.get("value", 0)
    return 0


def round_half_up(value: float, digits: int = 2) -> float:
    """Round to ``digits`` places with halves rounded up: 0.125 → 0.13, -0.125 → -0.12."""
    scale = 10**digits
    scaled = value * scale
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / scale


def _ratio(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    result = numerator / denominator
    return round_half_up(result) if math.isfinite(result) else 0.0


def _derive(row: Any) -> Dict[str, Any]:
    if not isinstance(row, dict):
        row = {}

    values: Dict[str, Any] = {}
    for name, metric in RAW_METRICS.items():
        raw = row.get(metric.source_field)
        values[name] = _safe_int(raw) if metric.is_count else _safe_float(raw)

    actions = row.get("actions")
    for name, metric in ACTION_METRICS.items():
        values[name] = _safe_int(_find_action(actions, metric.source_field))

    action_values = row.get("action_values")
    for name, metric in ACTION_VALUE_METRICS.items():
        values[name] = _safe_float(_find_action(action_values, metric.source_field))

    for name, (numerator, denominator) in DERIVED_RATIOS.items():
        values[name] = _ratio(values[numerator], values[denominator])

    # Currency / rate outputs are presented at 2 dp; counts stay integers
    for name, value in values.items():
        metric = get_metric(name)
        if metric is not None and not metric.is_count:
            values[name] = round_half_up(value)
    return values


def normalize(row: Any) -> DerivedMetrics:
    """Normalize one raw insight row."""
    return DerivedMetrics(**_derive(row))


def _entity_keys(level: str) -> tuple[str, str]:
    """Id / name field names for an insights level."""
    if level in ("campaign", "adset", "ad"):
        return f"{level}_id", f"{level}_name"
    return "account_id", "account_name"


def entity_identity(row: Dict[str, Any], level: str) -> tuple[str, str]:
    id_key, name_key = _entity_keys(level)
    return str(row.get(id_key) or ""), str(row.get(name_key) or "")


def normalize_entities(rows: Iterable[Any], level: str) -> List[EntityMetrics]:
    """Normalize breakdown rows, keeping each row's entity id and name."""
    out: List[EntityMetrics] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        entity_id, entity_name = entity_identity(row, level)
        out.append(
            EntityMetrics(entity_id=entity_id, entity_name=entity_name, **_derive(row))
        )
    return out


def normalize_daily(rows: Iterable[Any]) -> List[DailyMetrics]:
    """Normalize a daily series, keyed by each row's ``date_start``."""
    return [
        DailyMetrics(date=str(row.get("date_start") or ""), **_derive(row))
        for row in rows
        if isinstance(row, dict)
    ]
