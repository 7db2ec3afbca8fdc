"""Shared fixtures and fakes for ADLENS tests."""

from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from adlens.models.request_models import RetryPolicy


class FakeGraph:
    """Stands in for MetaClient: records GET calls and answers via ``handler``."""

    def __init__(self, handler: Callable[[str, Dict[str, Any]], Any]):
        self.handler = handler
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        params = params or {}
        self.calls.append((path, params))
        return self.handler(path, params)


@pytest.fixture
def fast_policy() -> RetryPolicy:
    return RetryPolicy(timeout_ms=1_000, max_retries=2, base_delay_ms=0)


def insight_row(**fields: Any) -> Dict[str, Any]:
    """Raw insight row with Graph-style string numbers."""
    row: Dict[str, Any] = {}
    purchases = fields.pop("purchases", None)
    revenue = fields.pop("revenue", None)
    for key, value in fields.items():
        row[key] = str(value) if isinstance(value, (int, float)) else value
    if purchases is not None:
        row["actions"] = [
            {"action_type": "purchase", "value": str(purchases)},
            {"action_type": "omni_purchase", "value": str(purchases)},
        ]
    if revenue is not None:
        row["action_values"] = [{"action_type": "purchase", "value": str(revenue)}]
    return row
