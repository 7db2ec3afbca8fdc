"""ADLENS — Report Assembler.

Runs the report data flow:
  resolve range → concurrent insight fetches → normalize → filter/sort
  → period comparison (account + per entity) → Report

The current-period account summary is required; every other section
degrades to empty when its fetch fails.
"""

import asyncio
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from adlens.analyzer.batch import name_matches
from adlens.analyzer.comparison import compare_metrics
from adlens.analyzer.date_range import TimeRangeSpec, previous_period, resolve
from adlens.analyzer.normalizer import (
    normalize,
    normalize_daily,
    normalize_entities,
)
from adlens.config import settings
from adlens.connectors.meta.client import MetaClient
from adlens.connectors.meta.fields import INSIGHT_FIELDS
from adlens.core.logging import get_logger
from adlens.core.metric_registry import COMPARISON_METRICS, ENTITY_COMPARISON_METRICS
from adlens.models.insight_models import DateRange, DerivedMetrics, EntityMetrics
from adlens.models.report_models import PeriodComparison, PeriodSnapshot, Report

logger = get_logger("analyzer.report")

ENTITY_LEVELS = ("campaign", "adset", "ad")


def _rows(result: Any) -> List[Dict[str, Any]]:
    if isinstance(result, dict) and isinstance(result.get("data"), list):
        return result["data"]
    return []


def _optional_rows(result: Any, section: str) -> List[Dict[str, Any]]:
    """Rows of an optional section; a failed fetch degrades to no rows."""
    if isinstance(result, BaseException):
        logger.warning(f"Report section '{section}' unavailable: {result}")
        return []
    return _rows(result)


def _filter_entities(
    entities: List[EntityMetrics], name_filter: Optional[Sequence[str]]
) -> List[EntityMetrics]:
    if name_filter:
        entities = [e for e in entities if name_matches(e.entity_name, name_filter)]
    entities = [e for e in entities if e.spend > 0]
    return sorted(entities, key=lambda e: e.spend, reverse=True)


def _period_comparison(
    current: DerivedMetrics,
    previous: DerivedMetrics,
    current_range: DateRange,
    previous_range: DateRange,
) -> PeriodComparison:
    return PeriodComparison(
        this_period=PeriodSnapshot(range=current_range.label, **current.model_dump()),
        previous_period=PeriodSnapshot(
            range=previous_range.label, **previous.model_dump()
        ),
        changes=compare_metrics(current, previous, COMPARISON_METRICS),
    )


def _attach_entity_comparisons(
    entities: List[EntityMetrics], previous: List[EntityMetrics]
) -> None:
    """Join on entity id.

    Entities absent last period, or without an id, get ``vs_previous = None``.
    """
    by_id = {p.entity_id: p for p in previous if p.entity_id}
    for entity in entities:
        prev = by_id.get(entity.entity_id)
        entity.vs_previous = (
            compare_metrics(entity, prev, ENTITY_COMPARISON_METRICS) if prev else None
        )


async def build_report(
    client: MetaClient,
    scope_id: str,
    spec: TimeRangeSpec = None,
    compare_previous: bool = True,
    name_filter: Optional[Sequence[str]] = None,
    *,
    level: str = "campaign",
    today: Optional[date] = None,
) -> Report:
    """Build a multi-section performance report for one ad account."""
    if level not in ENTITY_LEVELS:
        raise ValueError(f"level must be one of {', '.join(ENTITY_LEVELS)}")

    current_range = resolve(spec or settings.default_time_range, today)
    previous_range = previous_period(current_range) if compare_previous else None
    path = f"/{scope_id}/insights"
    limit = settings.report_entity_limit
    logger.info(
        f"Building report for {scope_id}: {current_range.label} "
        f"(level={level}, compare={compare_previous})"
    )

    def fetch(date_range: DateRange, fetch_level: str, **extra: Any):
        params = {
            "fields": INSIGHT_FIELDS,
            "time_range": date_range.as_param(),
            "level": fetch_level,
            **extra,
        }
        return client.get(path, params)

    calls = [
        fetch(current_range, "account"),
        fetch(current_range, level, limit=limit),
        fetch(current_range, "account", time_increment=1),
    ]
    if previous_range:
        calls.append(fetch(previous_range, "account"))
        calls.append(fetch(previous_range, level, limit=limit))

    results = await asyncio.gather(*calls, return_exceptions=True)

    # ── Required: current-period account summary ──
    if isinstance(results[0], BaseException):
        raise results[0]
    account_rows = _rows(results[0])
    account_summary = normalize(account_rows[0]) if account_rows else None

    # ── Optional sections ──
    entities = normalize_entities(_optional_rows(results[1], level), level)
    daily = normalize_daily(_optional_rows(results[2], "daily"))
    entities = _filter_entities(entities, name_filter)

    period_comparison = None
    if previous_range:
        prev_account_rows = _optional_rows(results[3], "previous account")
        prev_entity_rows = _optional_rows(results[4], f"previous {level}")

        if prev_account_rows and account_summary:
            period_comparison = _period_comparison(
                account_summary,
                normalize(prev_account_rows[0]),
                current_range,
                previous_range,
            )
        if prev_entity_rows:
            _attach_entity_comparisons(
                entities, normalize_entities(prev_entity_rows, level)
            )

    logger.info(
        f"Report ready: {len(entities)} {level}s, {len(daily)} days, "
        f"comparison={'yes' if period_comparison else 'no'}"
    )
    return Report(
        period=current_range.label,
        date_range=current_range,
        previous_range=previous_range,
        generated_at=datetime.now(timezone.utc).isoformat(),
        level=level,
        account_summary=account_summary,
        daily_breakdown=daily,
        period_comparison=period_comparison,
        by_entity=entities,
    )
