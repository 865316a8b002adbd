import math

from fasttrack.services import durations
from fasttrack.services.records import FastRecord

HOUR_MS = 3_600_000


def _fast(fid, start_h, end_h, completed=True):
    end = None if end_h is None else int(end_h * HOUR_MS)
    return FastRecord(id=fid, start_time=int(start_h * HOUR_MS), end_time=end, completed=completed)


def test_sixteen_hour_fast():
    fast = _fast("a", 0, 16)
    assert durations.fast_duration_hours(fast) == 16
    assert durations.total_hours([fast]) == 16


def test_totals_skip_incomplete_and_active():
    fasts = [_fast("a", 0, 16), _fast("b", 20, 30, completed=False), _fast("c", 40, None)]
    totals = durations.summarize(fasts)
    assert totals.count == 1
    assert totals.total_hours == 16
    assert totals.average_hours == 16
    assert totals.longest_hours == 16
    assert durations.completed_count(fasts) == 1


def test_empty_history_is_zero():
    totals = durations.summarize([])
    assert totals.count == 0
    assert totals.total_hours == 0
    assert totals.average_hours == 0
    assert durations.longest_fast_hours([]) == 0


def test_average_and_longest():
    fasts = [_fast("a", 0, 12), _fast("b", 24, 48)]
    assert durations.average_duration(fasts) == 18
    assert durations.longest_fast_hours(fasts) == 24


def test_elapsed_hours_counts_active_fast_up_to_as_of():
    active = _fast("a", 0, None)
    assert durations.elapsed_hours(active, 5 * HOUR_MS) == 5
    assert durations.elapsed_hours(_fast("b", 0, 3), 10 * HOUR_MS) == 3


def test_non_finite_times_are_ignored():
    bad = {"id": "x", "start_time": math.nan, "end_time": 10 * HOUR_MS, "completed": True}
    assert durations.fast_duration_hours(bad) is None
    assert durations.total_hours([bad]) == 0


def test_in_window_is_inclusive_on_both_ends():
    fasts = [_fast("a", 0, 10), _fast("b", 0, 20), _fast("c", 0, 21)]
    inside = durations.in_window(fasts, 10 * HOUR_MS, 20 * HOUR_MS)
    assert [f.id for f in inside] == ["a", "b"]
