from tests.helpers import HOUR_MS, fast_payload


def test_sync_counts_and_returns_cloud_state(client, auth_headers):
    good = fast_payload(16, fast_id="f1")
    bad = dict(fast_payload(16, fast_id="f2"), end_time=0)
    response = client.post("/sync", json={
        "fasts": [good, bad, {"id": "f3"}],
        "weights": [
            {"id": "w1", "date": "2024-01-01", "weight": 80},
            {"id": "w2", "date": "yesterday", "weight": 80},
        ],
        "profile": {"timezone": "Europe/London", "unlocked_badges": ["streak_3"]},
    }, headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["results"]["fasts"] == {"synced": 1, "skipped": 0, "errors": 2}
    assert body["results"]["weights"] == {"synced": 1, "skipped": 0, "errors": 1}
    assert body["results"]["profile_synced"] is True

    assert [f["id"] for f in body["data"]["fasts"]] == ["f1"]
    assert [w["id"] for w in body["data"]["weights"]] == ["w1"]
    profile = body["data"]["profile"]
    assert profile["timezone"] == "Europe/London"
    assert "streak_3" in profile["unlocked_badges"]
    assert "fasts_1" in profile["unlocked_badges"]


def test_stale_fast_is_skipped(client, auth_headers):
    newer = fast_payload(16, fast_id="f1")
    client.post("/sync", json={"fasts": [newer]}, headers=auth_headers)

    stale = dict(newer, end_time=newer["end_time"] - HOUR_MS, note="old copy")
    body = client.post("/sync", json={"fasts": [stale]}, headers=auth_headers).json()
    assert body["results"]["fasts"]["skipped"] == 1
    assert body["data"]["fasts"][0]["note"] is None


def test_badges_only_grow_through_sync(client, auth_headers):
    client.post("/sync", json={"profile": {"unlocked_badges": ["fasts_1"]}}, headers=auth_headers)
    body = client.post("/sync", json={"profile": {"unlocked_badges": []}}, headers=auth_headers).json()
    assert body["data"]["profile"]["unlocked_badges"] == ["fasts_1"]
