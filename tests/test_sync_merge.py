from fasttrack.services.sync import merge_badges, should_replace_fast


def test_newer_incoming_fast_wins():
    stored = {"id": "a", "start_time": 100, "end_time": None}
    assert should_replace_fast(stored, {"id": "a", "start_time": 100, "end_time": 500})


def test_stale_incoming_fast_loses():
    stored = {"id": "a", "start_time": 100, "end_time": 900}
    assert not should_replace_fast(stored, {"id": "a", "start_time": 100, "end_time": 500})


def test_tie_goes_to_incoming():
    stored = {"id": "a", "start_time": 100, "end_time": 500}
    assert should_replace_fast(stored, {"id": "a", "start_time": 100, "end_time": 500})
    assert should_replace_fast(None, {"id": "a", "start_time": 1})


def test_active_fast_compared_by_start_time():
    stored = {"id": "a", "start_time": 300}
    assert not should_replace_fast(stored, {"id": "a", "start_time": 200})
    assert should_replace_fast(stored, {"id": "a", "start_time": 400})


def test_badges_union_keeps_order():
    assert merge_badges(["fasts_1", "streak_3"], ["streak_3", "duration_16"], None) == [
        "fasts_1", "streak_3", "duration_16"
    ]
