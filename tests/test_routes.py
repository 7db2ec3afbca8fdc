"""API tests for the insights and report routes."""

from datetime import date
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from adlens.api.insight_routes import get_insights_service
from adlens.connectors.meta.account import AccountResolver
from adlens.connectors.meta.endpoints import MetaInsights
from adlens.connectors.meta.executor import CallError
from adlens.main import app
from adlens.models.insight_models import DateRange, DerivedMetrics, FetchOutcome
from adlens.models.report_models import Report
from adlens.models.request_models import ErrorKind

from conftest import FakeGraph


@pytest.fixture
def service():
    stub = AsyncMock(spec=MetaInsights)
    app.dependency_overrides[get_insights_service] = lambda: stub
    yield stub
    app.dependency_overrides.clear()


@pytest.fixture
def client(service):
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "adlens"


def test_insights_with_custom_dates(client, service):
    service.get_insights.return_value = {"data": [{"spend": "10.00"}]}

    response = client.get(
        "/insights",
        params={"object_id": "c1", "since": "2025-03-01", "until": "2025-03-07", "compact": "true"},
    )

    assert response.status_code == 200
    assert response.json() == {"status": "success", "insights": {"data": [{"spend": "10.00"}]}}
    kwargs = service.get_insights.await_args.kwargs
    assert kwargs["object_id"] == "c1"
    assert kwargs["compact"] is True
    assert kwargs["time_range"] == {"since": "2025-03-01", "until": "2025-03-07"}


def test_insights_with_preset(client, service):
    service.get_insights.return_value = {"data": []}

    client.get("/insights", params={"time_range": "this_week", "time_breakdown": "day"})

    kwargs = service.get_insights.await_args.kwargs
    assert kwargs["time_range"] == "this_week"
    assert kwargs["time_breakdown"] == "day"


@pytest.mark.parametrize(
    "error, status",
    [
        (CallError("Invalid OAuth access token.", 400, ErrorKind.CLIENT), 400),
        (CallError("Request timed out after 30000ms", 408, ErrorKind.TIMEOUT), 504),
        (CallError("HTTP 503: unavailable", 503, ErrorKind.SERVER), 502),
        (CallError("Network error: connection refused"), 502),
        (ValueError("level must be one of account, campaign, adset, ad"), 422),
    ],
)
def test_insights_error_mapping(client, service, error, status):
    service.get_insights.side_effect = error

    response = client.get("/insights")

    assert response.status_code == status
    if isinstance(error, CallError):
        assert response.json()["detail"] == f"Meta API error: {error.message}"


def test_bulk_insights(client, service):
    service.bulk_insights.return_value = {
        "results": [
            FetchOutcome(id="c1", data={"data": []}),
            FetchOutcome(id="c2", error="Object does not exist"),
        ],
        "total": 2,
    }

    response = client.post(
        "/insights/bulk",
        json={
            "object_ids": ["c1", "c2"],
            "time_range": {"since": "2025-03-01", "until": "2025-03-07"},
            "campaign_name_contains": ["tof"],
        },
    )

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "results": [
            {"id": "c1", "data": {"data": []}},
            {"id": "c2", "error": "Object does not exist"},
        ],
        "total": 2,
    }
    kwargs = service.bulk_insights.await_args.kwargs
    assert kwargs["object_ids"] == ["c1", "c2"]
    assert kwargs["name_contains"] == ["tof"]
    assert kwargs["time_range"] == DateRange(since=date(2025, 3, 1), until=date(2025, 3, 7))


def test_bulk_insights_rejects_bad_count(client, service):
    service.bulk_insights.side_effect = ValueError("object_ids must contain between 1 and 50 ids")

    response = client.post("/insights/bulk", json={"object_ids": []})

    assert response.status_code == 422


def test_report(client, service):
    current = DateRange(since=date(2025, 3, 8), until=date(2025, 3, 14))
    service.report.return_value = Report(
        period=current.label,
        date_range=current,
        level="campaign",
        account_summary=DerivedMetrics(spend=120.0, purchases=6, roas=4.0),
    )

    response = client.post("/report", json={"time_range": "last_7d", "compare_previous": False})

    assert response.status_code == 200
    body = response.json()
    assert body["period"] == "2025-03-08 → 2025-03-14"
    assert body["date_range"] == {"since": "2025-03-08", "until": "2025-03-14"}
    assert body["account_summary"]["roas"] == 4.0
    assert body["by_entity"] == []
    service.report.assert_awaited_once_with(
        time_range="last_7d",
        compare_previous=False,
        name_contains=None,
        level="campaign",
    )


def test_report_upstream_failure(client, service):
    service.report.side_effect = CallError("Service unavailable", 503, ErrorKind.SERVER)

    response = client.post("/report", json={})

    assert response.status_code == 502
    assert response.json()["detail"] == "Meta API error: Service unavailable"


def test_lifespan_wires_insights_service():
    with TestClient(app) as test_client:
        insights = test_client.app.state.insights
        assert isinstance(insights, MetaInsights)
        assert insights.accounts.client is insights.client


@pytest.mark.parametrize("params", [{"since": "2025-03-01"}, {"until": "2025-03-07"}])
def test_insights_half_custom_range_rejected(client, service, params):
    response = client.get("/insights", params=params)

    assert response.status_code == 422
    service.get_insights.assert_not_awaited()


def test_out_of_bounds_range_is_client_error():
    graph = FakeGraph(lambda path, params: {"data": []})
    app.dependency_overrides[get_insights_service] = lambda: MetaInsights(
        graph, AccountResolver(graph, configured_id="act_1")
    )
    try:
        response = TestClient(app).post("/report", json={"time_range": "last_99999999d"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 422
    assert "out of bounds" in response.json()["detail"]
    assert graph.calls == []
