"""Unit tests for the batch fetch orchestrator."""

import asyncio

import pytest

from adlens.analyzer.batch import fetch_all, filter_by_name, name_matches
from adlens.connectors.meta.executor import CallError
from adlens.models.insight_models import FetchOutcome


@pytest.mark.asyncio
async def test_results_follow_input_order():
    delays = {"a": 0.03, "b": 0.0, "c": 0.01}

    async def fetch_one(object_id):
        await asyncio.sleep(delays[object_id])
        return {"data": [{"id": object_id}]}

    outcomes = await fetch_all(["a", "b", "c"], fetch_one)

    assert [o.id for o in outcomes] == ["a", "b", "c"]
    assert all(o.ok for o in outcomes)
    assert outcomes[2].rows == [{"id": "c"}]


@pytest.mark.asyncio
async def test_partial_failure_is_reported_inline():
    async def fetch_one(object_id):
        if object_id == "bad":
            raise CallError("Unsupported get request", 400)
        return {"data": []}

    outcomes = await fetch_all(["ok1", "bad", "ok2"], fetch_one)

    assert [o.ok for o in outcomes] == [True, False, True]
    assert outcomes[1] == FetchOutcome(id="bad", error="Unsupported get request")
    assert outcomes[0].data == {"data": []}


@pytest.mark.asyncio
async def test_all_failures_still_one_outcome_each():
    async def fetch_one(object_id):
        raise RuntimeError()

    outcomes = await fetch_all(["x", "y"], fetch_one)

    assert [o.error for o in outcomes] == ["RuntimeError", "RuntimeError"]


@pytest.mark.asyncio
async def test_fetches_run_concurrently():
    ids = ["1", "2", "3"]
    arrived = 0
    all_in = asyncio.Event()

    async def fetch_one(object_id):
        nonlocal arrived
        arrived += 1
        if arrived == len(ids):
            all_in.set()
        # Only completes if every fetch is in flight at once
        await asyncio.wait_for(all_in.wait(), timeout=1)
        return object_id

    outcomes = await fetch_all(ids, fetch_one)

    assert [o.data for o in outcomes] == ids


@pytest.mark.asyncio
async def test_duplicate_ids_are_fetched_separately():
    calls = []

    async def fetch_one(object_id):
        calls.append(object_id)
        return {}

    outcomes = await fetch_all(["1", "1"], fetch_one)

    assert len(outcomes) == 2
    assert calls == ["1", "1"]


@pytest.mark.asyncio
async def test_empty_batch_returns_empty():
    async def fetch_one(object_id):
        raise AssertionError("should not be called")

    assert await fetch_all([], fetch_one) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("ids", ["120001", ["1", ""], ["1", None], ["1", 2], None])
async def test_invalid_ids_rejected(ids):
    async def fetch_one(object_id):
        return {}

    with pytest.raises(ValueError):
        await fetch_all(ids, fetch_one)


# ── Name filtering ──


def test_name_matches_is_case_insensitive():
    assert name_matches("BOF | Retargeting", ["bof"])
    assert name_matches("tof prospecting", ["MOF", "TOF"])
    assert not name_matches("Brand Awareness", ["tof"])
    assert not name_matches(None, ["tof"])


def test_filter_by_name_keeps_matches_and_failures():
    outcomes = [
        FetchOutcome(id="1", data={"data": [{"campaign_name": "TOF Broad"}]}),
        FetchOutcome(id="2", data={"data": [{"campaign_name": "Brand"}]}),
        FetchOutcome(id="3", error="timeout"),
        FetchOutcome(id="4", data={"data": []}),
    ]

    kept = filter_by_name(outcomes, ["tof"])

    assert [o.id for o in kept] == ["1", "3", "4"]
    assert filter_by_name(outcomes, None) is outcomes
    assert filter_by_name(outcomes, []) is outcomes
