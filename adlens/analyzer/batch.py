"""ADLENS — Batch Fetch Orchestrator.

Fans out independent fetches concurrently and collects one outcome per
input id, in input order. A failing item never fails the batch.
"""

import asyncio
from collections.abc import Sequence
from typing import Any, Awaitable, Callable, List

from adlens.core.logging import get_logger
from adlens.models.insight_models import FetchOutcome

logger = get_logger("analyzer.batch")

FetchOne = Callable[[str], Awaitable[Any]]


def _validate_ids(ids: Sequence[str]) -> List[str]:
    if isinstance(ids, (str, bytes)) or not isinstance(ids, Sequence):
        raise ValueError("ids must be a sequence of object ids")
    for object_id in ids:
        if not isinstance(object_id, str) or not object_id.strip():
            raise ValueError(f"Invalid object id: {object_id!r}")
    return list(ids)


async def _fetch_one(object_id: str, fetch_one: FetchOne) -> FetchOutcome:
    try:
        data = await fetch_one(object_id)
    except Exception as e:
        logger.warning(f"Fetch failed for {object_id}: {e}", extra={"entity_id": object_id})
        return FetchOutcome(id=object_id, error=str(e) or e.__class__.__name__)
    return FetchOutcome(id=object_id, data=data)


async def fetch_all(ids: Sequence[str], fetch_one: FetchOne) -> List[FetchOutcome]:
    """Run ``fetch_one`` for every id concurrently; results match input order."""
    object_ids = _validate_ids(ids)
    outcomes = await asyncio.gather(*(_fetch_one(i, fetch_one) for i in object_ids))

    failed = sum(1 for o in outcomes if not o.ok)
    logger.info(f"Batch fetched {len(outcomes)} objects ({failed} failed)")
    return list(outcomes)


def name_matches(name: Any, substrings: Sequence[str]) -> bool:
    """Case-insensitive: does ``name`` contain any of ``substrings``?"""
    lowered = str(name or "").lower()
    return any(s.lower() in lowered for s in substrings)


def filter_by_name(
    outcomes: List[FetchOutcome],
    substrings: Sequence[str] | None,
    name_field: str = "campaign_name",
) -> List[FetchOutcome]:
    """Keep outcomes with a row whose name matches.

    Errored or empty outcomes are kept so the caller can see them.
    """
    if not substrings:
        return outcomes
    return [
        o
        for o in outcomes
        if not o.rows
        or any(
            isinstance(row, dict) and name_matches(row.get(name_field), substrings)
            for row in o.rows
        )
    ]
