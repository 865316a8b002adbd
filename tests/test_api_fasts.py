from tests.helpers import HOUR_MS, fast_payload, now_ms, save_fast


def test_save_fast_unlocks_badges(client, auth_headers):
    response = save_fast(client, auth_headers, 16)
    assert response.status_code == 201
    body = response.json()
    assert body["created"] is True
    assert "fasts_1" in body["newly_unlocked_badges"]
    assert "duration_16" in body["newly_unlocked_badges"]
    assert "duration_18" not in body["newly_unlocked_badges"]

    badges = client.get("/stats/badges", headers=auth_headers).json()
    unlocked = {b["id"] for b in badges["badges"] if b["unlocked"]}
    assert {"fasts_1", "duration_16"} <= unlocked
    assert badges["total_count"] == len(badges["badges"])


def test_update_same_id_returns_200_and_no_repeat_unlocks(client, auth_headers):
    payload = fast_payload(16, fast_id="fast-1")
    assert client.post("/fasts", json=payload, headers=auth_headers).status_code == 201

    payload["note"] = "felt good"
    response = client.post("/fasts", json=payload, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["created"] is False
    assert response.json()["newly_unlocked_badges"] == []
    assert response.json()["fast"]["note"] == "felt good"


def test_invalid_fasts_rejected(client, auth_headers):
    start = now_ms() - 10 * HOUR_MS
    backwards = {"id": "x", "start_time": start, "end_time": start - 1, "completed": True}
    assert client.post("/fasts", json=backwards, headers=auth_headers).status_code == 400

    completed_without_end = {"id": "y", "start_time": start, "completed": True}
    assert client.post("/fasts", json=completed_without_end, headers=auth_headers).status_code == 400


def test_only_one_active_fast(client, auth_headers):
    start = now_ms() - 2 * HOUR_MS
    first = {"id": "active-1", "start_time": start}
    assert client.post("/fasts", json=first, headers=auth_headers).status_code == 201

    second = {"id": "active-2", "start_time": start + HOUR_MS}
    assert client.post("/fasts", json=second, headers=auth_headers).status_code == 400

    active = client.get("/fasts/active", headers=auth_headers).json()
    assert active["fast"]["id"] == "active-1"
    assert active["elapsed_hours"] >= 1.9


def test_list_and_delete(client, auth_headers):
    save_fast(client, auth_headers, 14, fast_id="a")
    save_fast(client, auth_headers, 18, ended_ago_ms=30 * HOUR_MS, fast_id="b")

    listing = client.get("/fasts", headers=auth_headers).json()
    assert listing["total_count"] == 2
    assert [f["id"] for f in listing["fasts"]] == ["a", "b"]

    assert client.delete("/fasts/a", headers=auth_headers).status_code == 200
    assert client.delete("/fasts/a", headers=auth_headers).status_code == 404


def test_stats(client, auth_headers):
    save_fast(client, auth_headers, 16, fast_id="a")
    save_fast(client, auth_headers, 20, ended_ago_ms=HOUR_MS + 24 * HOUR_MS, fast_id="b")
    stats = client.get("/stats/me", headers=auth_headers).json()
    assert stats["total_fasts"] == 2
    assert stats["total_hours"] == 36
    assert stats["average_duration"] == 18
    assert stats["longest_fast_hours"] == 20
    assert stats["longest_streak"] == 2
    assert stats["timezone"] == "UTC"


def test_fast_of_another_user_is_not_overwritten(client, auth_headers):
    from tests.helpers import register
    _, other_headers = register(client)
    save_fast(client, auth_headers, 16, fast_id="shared-id")
    assert save_fast(client, other_headers, 18, fast_id="shared-id").status_code == 404


def test_weights(client, auth_headers):
    created = client.post("/weights", json={"id": "w1", "date": "2024-01-02", "weight": 80.5}, headers=auth_headers)
    assert created.status_code == 201
    updated = client.post("/weights", json={"id": "w1", "date": "2024-01-02", "weight": 79.5}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.json()["weight"] == 79.5

    bad = client.post("/weights", json={"id": "w2", "date": "2024-13-40", "weight": 80}, headers=auth_headers)
    assert bad.status_code == 422

    assert client.get("/weights", headers=auth_headers).json()["total_count"] == 1
    assert client.delete("/weights/w1", headers=auth_headers).status_code == 200


def test_profile_update(client, auth_headers):
    response = client.put("/profile", json={"timezone": "Europe/London", "weight_unit": "kg"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["timezone"] == "Europe/London"
    assert client.put("/profile", json={"timezone": "Mars/Base"}, headers=auth_headers).status_code == 422
    assert client.put("/profile", json={"weight_unit": "stone"}, headers=auth_headers).status_code == 422


def test_starting_a_fast_unlocks_no_badges(client, auth_headers):
    # 2024-01-03 10:00 UTC would qualify for early bird once completed
    started = {"id": "morning", "start_time": 1704276000000, "end_time": None, "completed": False}
    response = client.post("/fasts", json=started, headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["newly_unlocked_badges"] == []

    finished = dict(started, end_time=started["start_time"] + 16 * HOUR_MS, completed=True)
    response = client.post("/fasts", json=finished, headers=auth_headers)
    assert response.status_code == 200
    assert "lifestyle_early_bird" in response.json()["newly_unlocked_badges"]
