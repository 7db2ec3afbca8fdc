"""ADLENS — Meta Insights Endpoints.

Builds insights query parameters and fetches single-object and bulk
insights on top of the resilient client.
"""

from typing import Any, Dict, List, Optional, Sequence

from adlens.analyzer.batch import fetch_all, filter_by_name, name_matches
from adlens.analyzer.date_range import TimeRangeSpec, resolve
from adlens.analyzer.report import build_report
from adlens.analyzer.signal_filter import strip_redundant
from adlens.connectors.meta.account import AccountResolver
from adlens.connectors.meta.client import MetaClient
from adlens.connectors.meta.fields import (
    BREAKDOWNS,
    DATE_PRESETS,
    INSIGHT_FIELDS,
    INSIGHT_LEVELS,
    MAX_BULK_IDS,
    TIME_BREAKDOWNS,
)
from adlens.core.logging import get_logger
from adlens.models.insight_models import FetchOutcome
from adlens.models.report_models import Report

logger = get_logger("meta.endpoints")

CAMPAIGN_LIST_FIELDS = "id,name"
CAMPAIGN_STATUS_FILTER = [
    {"field": "effective_status", "operator": "IN", "value": ["ACTIVE", "PAUSED"]}
]


def build_insight_params(
    time_range: TimeRangeSpec = None,
    date_preset: Optional[str] = None,
    time_breakdown: Optional[str] = None,
    time_increment: Optional[int] = None,
    level: Optional[str] = None,
    breakdowns: Optional[str] = None,
    limit: Optional[int] = None,
    after: Optional[str] = None,
    action_attribution_windows: Optional[str] = None,
) -> Dict[str, Any]:
    """Translate insight query options into Graph API parameters.

    Presets the API understands are passed through as ``date_preset``;
    everything else is resolved locally into an explicit ``time_range``.
    """
    params: Dict[str, Any] = {"fields": INSIGHT_FIELDS}

    if time_range:
        if isinstance(time_range, str) and time_range in DATE_PRESETS:
            params["date_preset"] = time_range
        else:
            params["time_range"] = resolve(time_range).as_param()
    elif date_preset:
        params["date_preset"] = date_preset
    else:
        params["date_preset"] = "last_7d"

    if time_breakdown:
        if time_breakdown not in TIME_BREAKDOWNS:
            raise ValueError(f"time_breakdown must be one of {', '.join(TIME_BREAKDOWNS)}")
        params["time_increment"] = TIME_BREAKDOWNS[time_breakdown]
    elif time_increment:
        if not 1 <= time_increment <= 90:
            raise ValueError("time_increment must be between 1 and 90")
        params["time_increment"] = time_increment

    if level:
        if level not in INSIGHT_LEVELS:
            raise ValueError(f"level must be one of {', '.join(INSIGHT_LEVELS)}")
        params["level"] = level
    if breakdowns:
        if breakdowns not in BREAKDOWNS:
            raise ValueError(f"Unsupported breakdown: {breakdowns}")
        params["breakdowns"] = breakdowns

    params["limit"] = limit
    params["after"] = after
    params["action_attribution_windows"] = action_attribution_windows
    return params


class MetaInsights:
    """Fetch insights for the resolved ad account or explicit objects."""

    def __init__(self, client: MetaClient, accounts: AccountResolver):
        self.client = client
        self.accounts = accounts

    async def get_insights(
        self,
        object_id: Optional[str] = None,
        compact: bool = False,
        **query: Any,
    ) -> Any:
        """Insights for one object (default: the ad account)."""
        target = object_id or await self.accounts.get()
        result = await self.client.get(f"/{target}/insights", build_insight_params(**query))
        return strip_redundant(result) if compact else result

    async def list_campaigns(
        self, name_contains: Optional[Sequence[str]] = None
    ) -> List[Dict[str, Any]]:
        """ACTIVE/PAUSED campaigns of the account, optionally name-filtered."""
        account_id = await self.accounts.get()
        result = await self.client.get(
            f"/{account_id}/campaigns",
            {
                "fields": CAMPAIGN_LIST_FIELDS,
                "limit": MAX_BULK_IDS,
                "filtering": CAMPAIGN_STATUS_FILTER,
            },
        )
        campaigns = result.get("data", []) if isinstance(result, dict) else []
        if name_contains:
            campaigns = [c for c in campaigns if name_matches(c.get("name"), name_contains)]
        return campaigns

    async def bulk_insights(
        self,
        object_ids: Optional[Sequence[str]] = None,
        name_contains: Optional[Sequence[str]] = None,
        compact: bool = False,
        **query: Any,
    ) -> Dict[str, Any]:
        """Insights for many objects in parallel; per-object failures are reported inline.

        Without ``object_ids`` the account's campaigns are listed (and
        name-filtered) first.
        """
        if object_ids is not None and not 1 <= len(object_ids) <= MAX_BULK_IDS:
            raise ValueError(f"object_ids must contain between 1 and {MAX_BULK_IDS} ids")

        params = build_insight_params(**query)
        ids = (
            list(object_ids)
            if object_ids is not None
            else [c["id"] for c in await self.list_campaigns(name_contains)]
        )

        async def fetch_one(object_id: str) -> Any:
            data = await self.client.get(f"/{object_id}/insights", params)
            return strip_redundant(data) if compact else data

        outcomes: List[FetchOutcome] = await fetch_all(ids, fetch_one)
        if object_ids is not None:
            outcomes = filter_by_name(outcomes, name_contains)

        logger.info(f"Bulk insights: {len(outcomes)} results for {len(ids)} objects")
        return {"results": outcomes, "total": len(outcomes)}

    async def report(
        self,
        time_range: TimeRangeSpec = None,
        compare_previous: bool = True,
        name_contains: Optional[Sequence[str]] = None,
        level: str = "campaign",
    ) -> Report:
        """Full performance report for the ad account."""
        account_id = await self.accounts.get()
        return await build_report(
            self.client,
            account_id,
            time_range,
            compare_previous,
            name_contains,
            level=level,
        )
