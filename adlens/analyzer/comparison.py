"""ADLENS — Period Comparison.

Signed delta and percentage change between two periods, formatted for
display (``+20``, ``-3.5%``).
"""

from typing import Dict, Iterable

from adlens.analyzer.normalizer import round_half_up
from adlens.models.insight_models import ComparisonResult, DerivedMetrics


def _format_number(value: float) -> str:
    """Shortest fixed-point rendering: 20.0 → "20", 12.50 → "12.5"."""
    text = f"{abs(value):.2f}".rstrip("0").rstrip(".")
    return text if text != "0" else "0"


def _signed(value: float) -> str:
    text = _format_number(value)
    if text == "0":
        return "0"
    return f"+{text}" if value > 0 else f"-{text}"


def pct_change(current: float, previous: float) -> ComparisonResult:
    """Delta and percent change from ``previous`` to ``current``.

    With a zero baseline the percentage is 100 when there is new activity
    and 0 otherwise.
    """
    diff = current - previous
    delta = round_half_up(diff, 2)
    if previous != 0:
        pct = round_half_up(diff / previous * 100, 1)
    else:
        pct = 100.0 if current > 0 else 0.0
    return ComparisonResult(delta=_signed(delta), pct=f"{_signed(pct)}%")


def compare_metrics(
    current: DerivedMetrics,
    previous: DerivedMetrics,
    metric_names: Iterable[str],
) -> Dict[str, ComparisonResult]:
    """One ComparisonResult per metric name."""
    return {
        name: pct_change(current.value(name), previous.value(name))
        for name in metric_names
    }
