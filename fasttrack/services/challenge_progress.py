"""
Challenge progress: a pure computation step plus an explicit persistence step.

``compute_progress`` reduces a user's fasts inside a challenge window to a
single number according to the challenge type. ``persist_if_completed`` is the
only place that writes to a participant row; callers commit the session.
"""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable

from fasttrack.services import durations
from fasttrack.services.records import (
    Timestamp,
    TimezoneLike,
    as_of_date,
    to_millis,
)
from fasttrack.services.streaks import completion_dates, day_streak_ending


class ChallengeType(str, enum.Enum):
    COMPLETE_FASTS = "complete_fasts"
    TOTAL_HOURS = "total_hours"
    LONGEST_FAST = "longest_fast"
    STREAK = "streak"


CHALLENGE_TYPES = tuple(t.value for t in ChallengeType)


@dataclass(frozen=True)
class ChallengeWindow:
    start: Timestamp
    end: Timestamp

    @property
    def start_ms(self) -> int:
        return to_millis(self.start)

    @property
    def end_ms(self) -> int:
        return to_millis(self.end)


@dataclass(frozen=True)
class ProgressResult:
    progress: int
    target_value: float

    @property
    def reached(self) -> bool:
        return self.target_value > 0 and self.progress >= self.target_value


Reducer = Callable[[list, ChallengeWindow, Timestamp, TimezoneLike], int]


def round_half_up(hours: float) -> int:
    """Whole hours, with .5 always rounding up (22.5 -> 23)."""
    return int(math.floor(hours + 0.5))


def _count(fasts, window, as_of, tz) -> int:
    return len(fasts)


def _total_hours(fasts, window, as_of, tz) -> int:
    return round_half_up(durations.total_hours(fasts))


def _longest(fasts, window, as_of, tz) -> int:
    return round_half_up(durations.longest_fast_hours(fasts))


def _streak(fasts, window, as_of, tz) -> int:
    # Freeze at the window end once the challenge has closed
    anchor_ms = min(to_millis(as_of), window.end_ms)
    dates = completion_dates(fasts, tz)
    if not dates:
        return 0
    return day_streak_ending(dates, as_of_date(anchor_ms, tz))


REDUCERS: dict[str, Reducer] = {
    ChallengeType.COMPLETE_FASTS.value: _count,
    ChallengeType.TOTAL_HOURS.value: _total_hours,
    ChallengeType.LONGEST_FAST.value: _longest,
    ChallengeType.STREAK.value: _streak,
}


def compute_progress(
    challenge_type: str,
    target_value: float,
    fasts: Iterable,
    window: ChallengeWindow,
    as_of: Timestamp,
    tz: TimezoneLike = None,
) -> ProgressResult:
    """Progress of one user's fasts against a challenge; unknown types score 0."""
    reducer = REDUCERS.get(getattr(challenge_type, "value", challenge_type))
    if reducer is None:
        return ProgressResult(progress=0, target_value=target_value)
    relevant = durations.in_window(fasts, window.start_ms, window.end_ms)
    return ProgressResult(progress=int(reducer(relevant, window, as_of, tz)), target_value=target_value)


def persist_if_completed(participant: Any, result: ProgressResult, now: datetime) -> bool:
    """
    Copy ``result`` onto a participant row.

    Returns True only on the transition to completed; ``completed_at`` is
    stamped once and a completed participant is never reverted.
    """
    participant.progress = result.progress
    if result.reached and not participant.completed:
        participant.completed = True
        participant.completed_at = now
        return True
    return False
