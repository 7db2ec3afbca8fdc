"""ADLENS — Redundant Action Filter.

Meta reports the same underlying event under several attribution-specific
action types (``omni_purchase``, ``offsite_conversion.fb_pixel_purchase``...).
This strips those duplicates from an insights payload.
"""

from typing import Any

from adlens.core.metric_registry import ACTION_LIST_FIELDS, REDUNDANT_ACTION_PREFIXES


def is_redundant(action: Any) -> bool:
    action_type = str(action.get("action_type") or "") if isinstance(action, dict) else ""
    return action_type.startswith(REDUNDANT_ACTION_PREFIXES)


def _strip_row(row: Any) -> Any:
    if not isinstance(row, dict):
        return row
    cleaned = dict(row)
    for field in ACTION_LIST_FIELDS:
        entries = cleaned.get(field)
        if isinstance(entries, list):
            cleaned[field] = [a for a in entries if not is_redundant(a)]
    return cleaned


def strip_redundant(payload: Any) -> Any:
    """Return a copy of ``{"data": [...]}`` with redundant action entries removed.

    Anything that is not shaped like an insights payload is returned as-is.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
        return payload
    return {**payload, "data": [_strip_row(row) for row in payload["data"]]}
