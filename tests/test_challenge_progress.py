from datetime import datetime
from types import SimpleNamespace

import pytest
import pytz

from fasttrack.services.challenge_progress import (
    ChallengeType,
    ChallengeWindow,
    ProgressResult,
    compute_progress,
    persist_if_completed,
)
from fasttrack.services.records import FastRecord, to_millis

HOUR_MS = 3_600_000


def _utc(*args):
    return pytz.UTC.localize(datetime(*args))


def _fast(fid, end: datetime, hours):
    end_ms = to_millis(end)
    return FastRecord(id=fid, start_time=end_ms - int(hours * HOUR_MS), end_time=end_ms, completed=True)


WINDOW = ChallengeWindow(start=_utc(2024, 1, 1), end=_utc(2024, 1, 31, 23, 59, 59))
AS_OF = _utc(2024, 1, 20)


def _participant():
    return SimpleNamespace(progress=0, completed=False, completed_at=None)


def test_total_hours_reaches_target():
    fasts = [
        _fast("a", _utc(2024, 1, 3, 12), 40),
        _fast("b", _utc(2024, 1, 8, 12), 40),
        _fast("c", _utc(2024, 1, 12, 12), 30),
    ]
    result = compute_progress("total_hours", 100, fasts, WINDOW, AS_OF)
    assert result.progress == 110
    assert result.reached


def test_completed_at_set_once():
    participant = _participant()
    first_stamp = datetime(2024, 1, 20, 10, 0)

    assert persist_if_completed(participant, ProgressResult(110, 100), now=first_stamp) is True
    assert participant.completed is True
    assert participant.completed_at == first_stamp

    assert persist_if_completed(participant, ProgressResult(120, 100), now=datetime(2024, 1, 21)) is False
    assert participant.progress == 120
    assert participant.completed_at == first_stamp


def test_completed_participant_is_never_reverted():
    participant = SimpleNamespace(progress=110, completed=True, completed_at=datetime(2024, 1, 2))
    assert persist_if_completed(participant, ProgressResult(40, 100), now=datetime(2024, 1, 3)) is False
    assert participant.completed is True
    assert participant.progress == 40


def test_complete_fasts_counts_only_window():
    fasts = [
        _fast("before", _utc(2023, 12, 31, 12), 16),
        _fast("a", _utc(2024, 1, 2, 12), 16),
        _fast("b", _utc(2024, 1, 3, 12), 16),
        _fast("after", _utc(2024, 2, 2, 12), 16),
    ]
    assert compute_progress(ChallengeType.COMPLETE_FASTS, 5, fasts, WINDOW, AS_OF).progress == 2


def test_longest_fast_rounds():
    fasts = [_fast("a", _utc(2024, 1, 2, 12), 23.6), _fast("b", _utc(2024, 1, 5, 12), 18)]
    assert compute_progress("longest_fast", 24, fasts, WINDOW, AS_OF).progress == 24


def test_longest_fast_half_hour_rounds_up_to_target():
    fasts = [_fast("a", _utc(2024, 1, 2, 12), 22.5)]
    result = compute_progress("longest_fast", 23, fasts, WINDOW, AS_OF)
    assert result.progress == 23
    assert result.reached


def test_total_hours_half_hour_rounds_up():
    fasts = [_fast("a", _utc(2024, 1, 2, 12), 10), _fast("b", _utc(2024, 1, 5, 12), 12.5)]
    result = compute_progress("total_hours", 23, fasts, WINDOW, AS_OF)
    assert result.progress == 23
    assert result.reached
    # 0.5 and 2.5 both go up, unlike round-half-even
    assert compute_progress("total_hours", 1, [_fast("c", _utc(2024, 1, 6, 12), 0.5)], WINDOW, AS_OF).progress == 1
    assert compute_progress("total_hours", 3, [_fast("d", _utc(2024, 1, 7, 12), 2.5)], WINDOW, AS_OF).progress == 3


def test_streak_uses_window_fasts_only():
    fasts = [
        _fast("out", _utc(2023, 12, 31, 12), 16),
        _fast("a", _utc(2024, 1, 1, 12), 16),
        _fast("b", _utc(2024, 1, 2, 12), 16),
    ]
    result = compute_progress("streak", 7, fasts, WINDOW, _utc(2024, 1, 2, 18))
    assert result.progress == 2
    assert not result.reached


def test_streak_freezes_at_window_end():
    window = ChallengeWindow(start=_utc(2024, 1, 1), end=_utc(2024, 1, 7, 23, 59, 59))
    fasts = [_fast(str(d), _utc(2024, 1, d, 12), 16) for d in range(4, 8)]
    # Evaluated weeks later, progress still reflects the run at the window end
    assert compute_progress("streak", 7, fasts, window, _utc(2024, 3, 1)).progress == 4


def test_unknown_type_scores_zero():
    fasts = [_fast("a", _utc(2024, 1, 2, 12), 16)]
    result = compute_progress("mystery", 1, fasts, WINDOW, AS_OF)
    assert result.progress == 0
    assert not result.reached


def test_completion_stamp_must_be_given():
    with pytest.raises(TypeError):
        persist_if_completed(_participant(), ProgressResult(110, 100))
