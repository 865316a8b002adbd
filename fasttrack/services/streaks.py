"""
Fasting streaks: consecutive local calendar days with a completed fast.

Days are bucketed by each fast's ``end_time`` in the caller's timezone.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from fasttrack.services.records import (
    Timestamp,
    TimezoneLike,
    as_of_date,
    completed_fasts,
    field,
    finite_ms,
    local_date,
)

# Days walked back from the anchor date; a longer run is reported as this value
STREAK_LOOKBACK_DAYS = 30


@dataclass(frozen=True)
class StreakSummary:
    current: int
    longest: int


def completion_dates(fasts: Iterable, tz: TimezoneLike = None) -> set[date]:
    """Local calendar dates on which at least one completed fast ended."""
    dates = set()
    for fast in completed_fasts(fasts):
        d = local_date(field(fast, "end_time"), tz)
        if d is not None:
            dates.add(d)
    return dates


def day_streak_ending(dates: set[date], anchor: date, lookback: int = STREAK_LOOKBACK_DAYS) -> int:
    """
    Count consecutive days with a completion, walking back from ``anchor``.

    An empty anchor day does not break the walk (the user may not have
    finished today's fast yet); the first empty day after it does.
    """
    streak = 0
    for offset in range(lookback):
        if anchor - timedelta(days=offset) in dates:
            streak += 1
        elif offset > 0:
            break
    return streak


def current_streak(fasts: Iterable, as_of: Timestamp, tz: TimezoneLike = None) -> int:
    """Current run of fasting days as of ``as_of``, capped at STREAK_LOOKBACK_DAYS."""
    dates = completion_dates(fasts, tz)
    if not dates:
        return 0
    return day_streak_ending(dates, as_of_date(as_of, tz))


def longest_streak(fasts: Iterable, tz: TimezoneLike = None) -> int:
    """Longest run of consecutive fasting days anywhere in the history."""
    ordered = sorted(completed_fasts(fasts), key=lambda f: finite_ms(field(f, "end_time")))

    longest = 0
    running = 0
    last: Optional[date] = None
    for fast in ordered:
        d = local_date(field(fast, "end_time"), tz)
        if d is None:
            continue
        if last is None:
            running = 1
        else:
            gap = (d - last).days
            if gap == 1:
                running += 1
            elif gap != 0:
                running = 1
        longest = max(longest, running)
        last = d
    return longest


def streak_summary(fasts: Iterable, as_of: Timestamp, tz: TimezoneLike = None) -> StreakSummary:
    fasts = list(fasts or [])
    return StreakSummary(
        current=current_streak(fasts, as_of, tz),
        longest=longest_streak(fasts, tz),
    )
