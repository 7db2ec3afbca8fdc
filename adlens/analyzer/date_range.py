"""ADLENS — Date Range Resolver.

Turns a symbolic or explicit time specification into a concrete inclusive
calendar interval, and computes the preceding interval of equal length.
All arithmetic is on UTC calendar dates.
"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Union

from adlens.models.insight_models import DateRange

DEFAULT_DAYS = 7

_LAST_N_DAYS = re.compile(r"^last_(\d+)d$")

TimeRangeSpec = Union[str, Mapping[str, Any], DateRange, None]


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def _last_n_days(today: date, days: int) -> DateRange:
    # Window ends yesterday
    try:
        until = today - timedelta(days=1)
        since = until - timedelta(days=days - 1)
    except OverflowError as e:
        raise ValueError(f"time range out of bounds: last {days} days") from e
    return DateRange(since=since, until=until)


def _from_symbol(spec: str, today: date) -> DateRange:
    if spec == "today":
        return DateRange(since=today, until=today)
    if spec == "yesterday":
        day = today - timedelta(days=1)
        return DateRange(since=day, until=day)
    if spec == "this_week":
        return DateRange(since=_week_start(today), until=today)
    if spec == "last_week":
        monday = _week_start(today) - timedelta(days=7)
        return DateRange(since=monday, until=monday + timedelta(days=6))
    if spec == "this_month":
        return DateRange(since=today.replace(day=1), until=today)
    if spec == "last_month":
        last_day = today.replace(day=1) - timedelta(days=1)
        return DateRange(since=last_day.replace(day=1), until=last_day)

    match = _LAST_N_DAYS.match(spec)
    days = int(match.group(1)) if match else DEFAULT_DAYS
    return _last_n_days(today, days if days >= 1 else DEFAULT_DAYS)


def resolve(spec: TimeRangeSpec = None, today: Optional[date] = None) -> DateRange:
    """Resolve ``spec`` into a DateRange.

    ``spec`` may be a DateRange, a ``{"since", "until"}`` mapping, or one of
    ``today``, ``yesterday``, ``this_week``, ``last_week``, ``this_month``,
    ``last_month``, ``last_<N>d``. Unknown strings and ``None`` mean the
    last 7 full days.
    """
    if isinstance(spec, DateRange):
        return spec
    if isinstance(spec, Mapping):
        if "since" not in spec or "until" not in spec:
            raise ValueError("Explicit time range needs both 'since' and 'until'")
        return DateRange(since=spec["since"], until=spec["until"])

    today = today or utc_today()
    return _from_symbol((spec or "").strip().lower(), today)


def previous_period(current: DateRange) -> DateRange:
    """The immediately preceding, equal-length, non-overlapping window."""
    try:
        prev_until = current.since - timedelta(days=1)
        prev_since = prev_until - timedelta(days=current.days - 1)
    except OverflowError as e:
        raise ValueError(f"no previous period before {current.label}") from e
    return DateRange(since=prev_since, until=prev_until)
