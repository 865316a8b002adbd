from datetime import datetime, timedelta

import pytz

from tests.helpers import register, save_fast


def _window(days_before=2, days_after=5):
    now = datetime.now(pytz.UTC)
    return (now - timedelta(days=days_before)).isoformat(), (now + timedelta(days=days_after)).isoformat()


def _create(client, headers, **overrides):
    start, end = _window()
    payload = {
        "name": "Hours sprint",
        "type": "total_hours",
        "target_value": 30,
        "start_date": start,
        "end_date": end,
        "is_public": True,
    }
    payload.update(overrides)
    return client.post("/social/challenges", json=payload, headers=headers)


def test_create_validates_input(client, auth_headers):
    assert _create(client, auth_headers, type="calories").status_code == 400
    assert _create(client, auth_headers, target_value=0).status_code == 400
    start, end = _window()
    assert _create(client, auth_headers, start_date=end, end_date=start).status_code == 400


def test_creator_is_enrolled_and_completes_on_read(client, auth_headers):
    created = _create(client, auth_headers)
    assert created.status_code == 201
    challenge = created.json()
    assert challenge["is_joined"] is True
    assert challenge["participant_count"] == 1
    assert len(challenge["invite_code"]) == 6

    save_fast(client, auth_headers, 16, fast_id="a")
    save_fast(client, auth_headers, 20, ended_ago_ms=26 * 3_600_000, fast_id="b")

    detail = client.get(f"/social/challenges/{challenge['id']}", headers=auth_headers).json()
    assert detail["just_completed"] is True
    assert detail["participants"][0]["progress"] == 36
    assert detail["participants"][0]["completed"] is True
    completed_at = detail["participants"][0]["completed_at"]
    assert completed_at

    again = client.get(f"/social/challenges/{challenge['id']}", headers=auth_headers).json()
    assert again["just_completed"] is False
    assert again["participants"][0]["completed_at"] == completed_at


def test_join_by_invite_code_and_capacity(client, auth_headers):
    challenge = _create(client, auth_headers, is_public=False, max_participants=2).json()
    _, second = register(client)
    _, third = register(client)

    assert client.post("/social/challenges/join", json={"challenge_id": challenge["id"]}, headers=second).status_code == 404

    joined = client.post("/social/challenges/join", json={"invite_code": challenge["invite_code"].lower()}, headers=second)
    assert joined.status_code == 200
    assert joined.json()["challenge_id"] == challenge["id"]

    again = client.post("/social/challenges/join", json={"invite_code": challenge["invite_code"]}, headers=second)
    assert again.status_code == 400

    full = client.post("/social/challenges/join", json={"invite_code": challenge["invite_code"]}, headers=third)
    assert full.status_code == 400
    assert client.get(f"/social/challenges/{challenge['id']}", headers=third).status_code == 404

    assert client.post("/social/challenges/join", json={}, headers=third).status_code == 400
    assert client.post("/social/challenges/join", json={"invite_code": "ZZZZZZ"}, headers=third).status_code == 404


def test_list_and_leave(client, auth_headers):
    challenge = _create(client, auth_headers).json()
    _, other = register(client)

    public = client.get("/social/challenges", params={"type": "public"}, headers=other).json()
    assert [c["id"] for c in public["challenges"]] == [challenge["id"]]
    assert public["challenges"][0]["invite_code"] is None
    assert client.get("/social/challenges", params={"type": "mine"}, headers=other).json()["challenges"] == []

    client.post("/social/challenges/join", json={"challenge_id": challenge["id"]}, headers=other)
    active = client.get("/social/challenges", params={"type": "active"}, headers=other).json()
    assert len(active["challenges"]) == 1

    assert client.delete(f"/social/challenges/{challenge['id']}/membership", headers=other).status_code == 200
    assert client.delete(f"/social/challenges/{challenge['id']}/membership", headers=other).status_code == 404
    assert client.get("/social/challenges", params={"type": "bogus"}, headers=other).status_code == 400


def test_challenge_leaderboard(client, auth_headers):
    challenge = _create(client, auth_headers, type="complete_fasts", target_value=5).json()
    _, other = register(client)
    client.post("/social/challenges/join", json={"challenge_id": challenge["id"]}, headers=other)
    save_fast(client, other, 16)
    client.get(f"/social/challenges/{challenge['id']}", headers=other)

    board = client.get("/social/leaderboard", params={"challenge_id": challenge["id"]}, headers=auth_headers).json()
    assert board["type"] == "complete_fasts"
    assert [e["value"] for e in board["leaderboard"]] == [1, 0]


def test_weekly_challenge(client, auth_headers):
    current = client.get("/weekly-challenges/current", headers=auth_headers)
    assert current.status_code == 200
    weekly = current.json()["challenge"]
    assert weekly["is_joined"] is False
    assert 0 <= weekly["hours_left"] < 24
    assert 0 <= weekly["days_left"] <= 7

    # Second request reuses the same row
    assert client.get("/weekly-challenges/current", headers=auth_headers).json()["challenge"]["id"] == weekly["id"]

    assert client.post(f"/weekly-challenges/{weekly['id']}/join", headers=auth_headers).status_code == 200
    assert client.post(f"/weekly-challenges/{weekly['id']}/join", headers=auth_headers).status_code == 400
    assert client.post("/weekly-challenges/missing/join", headers=auth_headers).status_code == 404

    refreshed = client.get("/weekly-challenges/current", headers=auth_headers).json()["challenge"]
    assert refreshed["is_joined"] is True
    assert refreshed["participant_count"] == 1

    active = client.get("/weekly-challenges", headers=auth_headers).json()
    assert [c["id"] for c in active["challenges"]] == [weekly["id"]]

    board = client.get(f"/weekly-challenges/{weekly['id']}/leaderboard", headers=auth_headers).json()
    assert len(board["leaderboard"]) == 1
    assert board["leaderboard"][0]["is_current_user"] is True

    assert client.delete(f"/weekly-challenges/{weekly['id']}/membership", headers=auth_headers).status_code == 200
    assert client.delete(f"/weekly-challenges/{weekly['id']}/membership", headers=auth_headers).status_code == 404
