import math
from datetime import datetime

import pytest
import pytz

from fasttrack.services.badges import (
    BADGES,
    BadgeCategory,
    badges_by_category,
    evaluate_badges,
    get_badge,
)
from fasttrack.services.records import FastRecord, to_millis

HOUR_MS = 3_600_000


def _utc(*args):
    return pytz.UTC.localize(datetime(*args))


def _fast(fid, start: datetime, hours, completed=True):
    start_ms = to_millis(start)
    return FastRecord(id=fid, start_time=start_ms, end_time=start_ms + int(hours * HOUR_MS), completed=completed)


def test_sixteen_hour_fast_unlocks_duration_16_only_up_to_its_length():
    fast = FastRecord(id="a", start_time=0, end_time=16 * HOUR_MS, completed=True)
    newly = evaluate_badges([fast], [], triggering=fast, as_of=16 * HOUR_MS)
    assert "duration_16" in newly
    assert "duration_12" in newly
    assert "duration_18" not in newly
    assert "fasts_1" in newly


def test_already_unlocked_badges_are_not_returned():
    fast = FastRecord(id="a", start_time=0, end_time=16 * HOUR_MS, completed=True)
    first = evaluate_badges([fast], [], triggering=fast, as_of=16 * HOUR_MS)
    second = evaluate_badges([fast], first, triggering=fast, as_of=16 * HOUR_MS)
    assert second == []


def test_hours_badges_need_a_triggering_fast():
    fast = FastRecord(id="a", start_time=0, end_time=20 * HOUR_MS, completed=True)
    newly = evaluate_badges([fast], [], as_of=20 * HOUR_MS)
    assert not [b for b in newly if b.startswith("duration_")]
    assert "fasts_1" in newly


def test_incomplete_trigger_unlocks_nothing():
    fast = FastRecord(id="a", start_time=0, end_time=30 * HOUR_MS, completed=False)
    newly = evaluate_badges([fast], [], triggering=fast, as_of=30 * HOUR_MS)
    assert newly == []


def test_in_progress_morning_fast_is_not_an_early_bird():
    start = to_millis(_utc(2024, 1, 3, 10))
    active = FastRecord(id="a", start_time=start, end_time=None, completed=False)
    newly = evaluate_badges([active], [], triggering=active, as_of=start + HOUR_MS)
    assert "lifestyle_early_bird" not in newly
    assert "lifestyle_night_owl" not in newly


def test_start_hour_lifestyle_badges():
    early = _fast("a", _utc(2024, 1, 3, 18), 16)
    late = _fast("b", _utc(2024, 1, 3, 23), 16)
    assert "lifestyle_early_bird" in evaluate_badges([early], [], triggering=early, as_of=early.end_time)
    newly = evaluate_badges([late], [], triggering=late, as_of=late.end_time)
    assert "lifestyle_night_owl" in newly
    assert "lifestyle_early_bird" not in newly


def test_start_hour_uses_profile_timezone():
    # 03:00 UTC is 22:00 the previous evening in New York
    fast = _fast("a", _utc(2024, 1, 10, 3), 16)
    newly = evaluate_badges([fast], [], triggering=fast, as_of=fast.end_time, tz="America/New_York")
    assert "lifestyle_night_owl" in newly


def test_weekend_badge():
    # 2024-01-06 is a Saturday
    fast = _fast("a", _utc(2024, 1, 5, 20), 16)
    assert "lifestyle_weekend" in evaluate_badges([fast], [], as_of=fast.end_time)


def test_perfect_week_and_streak_badges():
    fasts = [_fast(str(d), _utc(2024, 1, d, 0), 16) for d in range(1, 8)]
    newly = evaluate_badges(fasts, [], as_of=_utc(2024, 1, 7, 20))
    assert "lifestyle_perfect_week" in newly
    assert "streak_3" in newly
    assert "streak_7" in newly
    assert "streak_14" not in newly
    assert "fasts_5" in newly


def test_malformed_fast_is_no_unlock():
    bad = {"id": "x", "start_time": math.inf, "end_time": math.nan, "completed": True}
    assert evaluate_badges([bad], [], triggering=bad, as_of=0) == []


def test_catalog_lookup():
    assert len({b.id for b in BADGES}) == len(BADGES)
    assert get_badge("duration_16").requirement == 16
    assert get_badge("nope") is None
    assert all(b.category == BadgeCategory.STREAK for b in badges_by_category(BadgeCategory.STREAK))


def test_as_of_must_be_given():
    fast = FastRecord(id="a", start_time=0, end_time=16 * HOUR_MS, completed=True)
    with pytest.raises(TypeError):
        evaluate_badges([fast], [], triggering=fast)
