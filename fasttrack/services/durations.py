"""Per-fast durations and history totals, in hours."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from fasttrack.services.records import (
    MS_PER_HOUR,
    Timestamp,
    completed_fasts,
    field,
    finite_ms,
    to_millis,
)


@dataclass(frozen=True)
class FastingTotals:
    count: int
    total_hours: float
    average_hours: float
    longest_hours: float


def fast_duration_hours(fast: Any) -> Optional[float]:
    """Duration of a completed fast in hours, or None when it can't be measured."""
    if not field(fast, "completed"):
        return None
    start = finite_ms(field(fast, "start_time"))
    end = finite_ms(field(fast, "end_time"))
    if start is None or end is None:
        return None
    hours = (end - start) / MS_PER_HOUR
    return hours if math.isfinite(hours) else None


def elapsed_hours(fast: Any, as_of: Timestamp) -> float:
    """Hours elapsed on a fast, counting an active fast up to ``as_of``."""
    start = finite_ms(field(fast, "start_time"))
    if start is None:
        return 0.0
    end = finite_ms(field(fast, "end_time"))
    if end is None:
        end = to_millis(as_of)
    return max(0.0, (end - start) / MS_PER_HOUR)


def _durations(fasts: Iterable) -> list[float]:
    durations = []
    for fast in fasts or []:
        hours = fast_duration_hours(fast)
        if hours is not None:
            durations.append(hours)
    return durations


def completed_count(fasts: Iterable) -> int:
    return len(completed_fasts(fasts))


def total_hours(fasts: Iterable) -> float:
    return sum(_durations(fasts))


def average_duration(fasts: Iterable) -> float:
    durations = _durations(fasts)
    if not durations:
        return 0.0
    return sum(durations) / len(durations)


def longest_fast_hours(fasts: Iterable) -> float:
    return max(_durations(fasts), default=0.0)


def in_window(fasts: Iterable, window_start: Timestamp, window_end: Timestamp) -> list:
    """Completed fasts whose end time falls in [window_start, window_end]."""
    start = to_millis(window_start)
    end = to_millis(window_end)
    return [
        f for f in completed_fasts(fasts)
        if start <= field(f, "end_time") <= end
    ]


def summarize(fasts: Iterable) -> FastingTotals:
    durations = _durations(fasts)
    total = sum(durations)
    return FastingTotals(
        count=len(durations),
        total_hours=total,
        average_hours=total / len(durations) if durations else 0.0,
        longest_hours=max(durations, default=0.0),
    )
