from datetime import date, datetime, timedelta

import pytz

from fasttrack.services.records import FastRecord, to_millis
from fasttrack.services.streaks import (
    STREAK_LOOKBACK_DAYS,
    current_streak,
    day_streak_ending,
    longest_streak,
    streak_summary,
)

HOUR_MS = 3_600_000


def _fast(fid, end: datetime, hours=16, completed=True):
    end_ms = to_millis(end)
    return FastRecord(id=fid, start_time=end_ms - hours * HOUR_MS, end_time=end_ms, completed=completed)


def _utc(*args):
    return pytz.UTC.localize(datetime(*args))


def test_three_consecutive_days():
    fasts = [
        _fast("a", _utc(2024, 1, 1, 12)),
        _fast("b", _utc(2024, 1, 2, 12)),
        _fast("c", _utc(2024, 1, 3, 12)),
    ]
    summary = streak_summary(fasts, _utc(2024, 1, 3, 18))
    assert summary.current == 3
    assert summary.longest == 3


def test_gap_breaks_streak():
    fasts = [_fast("a", _utc(2024, 1, 1, 12)), _fast("c", _utc(2024, 1, 3, 12))]
    assert current_streak(fasts, _utc(2024, 1, 3, 18)) == 1
    assert longest_streak(fasts) == 1


def test_today_without_fast_does_not_break_streak():
    fasts = [_fast("a", _utc(2024, 1, 1, 12)), _fast("b", _utc(2024, 1, 2, 12))]
    assert current_streak(fasts, _utc(2024, 1, 3, 8)) == 2


def test_two_empty_days_reset_current_streak():
    fasts = [_fast("a", _utc(2024, 1, 1, 12))]
    assert current_streak(fasts, _utc(2024, 1, 3, 8)) == 0


def test_same_day_fasts_do_not_inflate():
    fasts = [
        _fast("a", _utc(2024, 1, 1, 8)),
        _fast("b", _utc(2024, 1, 1, 20)),
        _fast("c", _utc(2024, 1, 2, 12)),
    ]
    assert longest_streak(fasts) == 2
    assert current_streak(fasts, _utc(2024, 1, 2, 13)) == 2


def test_incomplete_and_open_fasts_ignored():
    fasts = [
        _fast("a", _utc(2024, 1, 1, 12), completed=False),
        FastRecord(id="b", start_time=to_millis(_utc(2024, 1, 2, 1)), end_time=None, completed=True),
    ]
    assert current_streak(fasts, _utc(2024, 1, 2, 12)) == 0
    assert longest_streak(fasts) == 0


def test_empty_history():
    assert current_streak([], _utc(2024, 1, 1)) == 0
    assert longest_streak([]) == 0


def test_current_streak_capped_by_lookback():
    fasts = [_fast(str(i), _utc(2024, 1, 1, 12) + timedelta(days=i)) for i in range(45)]
    assert current_streak(fasts, _utc(2024, 2, 14, 13)) == STREAK_LOOKBACK_DAYS
    assert longest_streak(fasts) == 45


def test_timezone_moves_completion_date():
    # 23:30 UTC on Jan 1 is already Jan 2 in Tokyo
    fasts = [_fast("a", _utc(2024, 1, 1, 23, 30)), _fast("b", _utc(2024, 1, 2, 16))]
    assert longest_streak(fasts, "UTC") == 2
    assert longest_streak(fasts, "Asia/Tokyo") == 1


def test_day_streak_ending_walks_back_from_anchor():
    dates = {date(2024, 1, 1), date(2024, 1, 2)}
    assert day_streak_ending(dates, date(2024, 1, 2)) == 2
    assert day_streak_ending(dates, date(2024, 1, 3)) == 2
    assert day_streak_ending(dates, date(2024, 1, 4)) == 0


def test_dict_records_accepted():
    fasts = [{"id": "a", "start_time": 0, "end_time": 16 * HOUR_MS, "completed": True}]
    assert longest_streak(fasts) == 1
