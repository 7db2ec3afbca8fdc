"""ADLENS — Insights & Report API Routes."""

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel

from adlens.connectors.meta.endpoints import MetaInsights
from adlens.connectors.meta.executor import CallError
from adlens.core.logging import get_logger
from adlens.models.insight_models import DateRange
from adlens.models.report_models import Report
from adlens.models.request_models import ErrorKind

logger = get_logger("api.insights")

router = APIRouter(tags=["Insights"])

_STATUS_BY_KIND = {
    ErrorKind.CLIENT: 400,
    ErrorKind.TIMEOUT: 504,
    ErrorKind.SERVER: 502,
    ErrorKind.NETWORK: 502,
}


def get_insights_service(request: Request) -> MetaInsights:
    """Dependency: the process-wide insights service."""
    return request.app.state.insights


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, CallError):
        return HTTPException(
            status_code=_STATUS_BY_KIND.get(e.kind, 502),
            detail=f"Meta API error: {e.message}",
        )
    return HTTPException(status_code=422, detail=str(e))


# ── Request Models ──


class BulkInsightsRequest(BaseModel):
    """Request body for POST /insights/bulk."""

    object_ids: Optional[List[str]] = None
    """Campaign/adset/ad IDs. Omit to use every ACTIVE/PAUSED campaign."""
    time_range: Optional[Union[DateRange, str]] = None
    date_preset: Optional[str] = None
    level: Optional[str] = None
    time_breakdown: Optional[str] = None
    time_increment: Optional[int] = None
    campaign_name_contains: Optional[List[str]] = None
    compact: bool = False
    action_attribution_windows: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"object_ids": ["120001", "120002"], "time_range": "last_14d"},
                {"campaign_name_contains": ["TOF", "BOF"], "compact": True},
            ]
        }
    }


class ReportRequest(BaseModel):
    """Request body for POST /report."""

    time_range: Optional[Union[DateRange, str]] = None
    """Preset (last_7d, this_week, last_month, ...) or {since, until}. Default: last_7d."""
    compare_previous: bool = True
    campaign_name_contains: Optional[List[str]] = None
    level: str = "campaign"


# ── Endpoints ──


@router.get("/insights")
async def get_insights(
    object_id: Optional[str] = Query(None, description="Campaign/adset/ad ID. Omit for account-level."),
    time_range: Optional[str] = Query(None, description="Preset, e.g. last_7d or this_week"),
    since: Optional[str] = Query(None, description="Custom start date (YYYY-MM-DD)"),
    until: Optional[str] = Query(None, description="Custom end date (YYYY-MM-DD)"),
    date_preset: Optional[str] = None,
    time_breakdown: Optional[str] = Query(None, description="day | week | month"),
    level: Optional[str] = None,
    breakdowns: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    after: Optional[str] = None,
    action_attribution_windows: Optional[str] = None,
    compact: bool = False,
    service: MetaInsights = Depends(get_insights_service),
):
    """Performance insights for the account or a single object."""
    if bool(since) != bool(until):
        raise HTTPException(status_code=422, detail="since and until must be given together")
    spec = {"since": since, "until": until} if since else time_range
    try:
        data = await service.get_insights(
            object_id=object_id,
            compact=compact,
            time_range=spec,
            date_preset=date_preset,
            time_breakdown=time_breakdown,
            level=level,
            breakdowns=breakdowns,
            limit=limit,
            after=after,
            action_attribution_windows=action_attribution_windows,
        )
    except (CallError, ValueError) as e:
        logger.error(f"Insights fetch failed: {e}")
        raise _http_error(e)
    return {"status": "success", "insights": data}


@router.post("/insights/bulk")
async def bulk_insights(
    request: BulkInsightsRequest,
    service: MetaInsights = Depends(get_insights_service),
):
    """Insights for many objects in parallel; failed objects are reported inline."""
    try:
        result = await service.bulk_insights(
            object_ids=request.object_ids,
            name_contains=request.campaign_name_contains,
            compact=request.compact,
            time_range=request.time_range,
            date_preset=request.date_preset,
            level=request.level,
            time_breakdown=request.time_breakdown,
            time_increment=request.time_increment,
            action_attribution_windows=request.action_attribution_windows,
        )
    except (CallError, ValueError) as e:
        logger.error(f"Bulk insights failed: {e}")
        raise _http_error(e)
    return {
        "status": "success",
        "results": [o.model_dump(exclude_none=True) for o in result["results"]],
        "total": result["total"],
    }


@router.post("/report", response_model=Report)
async def generate_report(
    request: ReportRequest,
    service: MetaInsights = Depends(get_insights_service),
):
    """Account summary, daily breakdown, period comparison and per-entity metrics."""
    try:
        return await service.report(
            time_range=request.time_range,
            compare_previous=request.compare_previous,
            name_contains=request.campaign_name_contains,
            level=request.level,
        )
    except (CallError, ValueError) as e:
        logger.error(f"Report failed: {e}")
        raise _http_error(e)
