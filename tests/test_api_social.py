from tests.helpers import register, save_fast, set_username


def _friends(client):
    alice, alice_headers = register(client, display_name="Alice")
    bob, bob_headers = register(client, display_name="Bob")
    set_username(client, alice_headers, "alice")
    set_username(client, bob_headers, "Bob!")
    return (alice, alice_headers), (bob, bob_headers)


def test_username_is_cleaned_and_unique(client):
    (_, alice_headers), (_, bob_headers) = _friends(client)
    assert client.get("/social/profile", headers=bob_headers).json()["username"] == "bob"

    taken = client.put("/social/profile", json={"username": "ALICE"}, headers=bob_headers)
    assert taken.status_code == 400
    too_short = client.put("/social/profile", json={"username": "ab"}, headers=bob_headers)
    assert too_short.status_code == 400


def test_friend_request_flow(client):
    (alice, alice_headers), (bob, bob_headers) = _friends(client)
    save_fast(client, bob_headers, 16)

    sent = client.post("/social/friends/request", json={"recipient_username": "bob"}, headers=alice_headers)
    assert sent.status_code == 200
    request_id = sent.json()["id"]

    duplicate = client.post("/social/friends/request", json={"recipient_username": "bob"}, headers=alice_headers)
    assert duplicate.status_code == 400

    assert client.get("/social/friends/requests/sent", headers=alice_headers).json()["total_count"] == 1
    incoming = client.get("/social/friends/requests", headers=bob_headers).json()
    assert incoming["requests"][0]["requester_username"] == "alice"

    assert client.post(f"/social/friends/request/{request_id}/accept", headers=bob_headers).status_code == 200

    friends = client.get("/social/friends/list", headers=alice_headers).json()
    assert friends["total_count"] == 1
    friend = friends["friends"][0]
    assert friend["friend_id"] == bob["id"]
    assert friend["friend_username"] == "bob"
    assert friend["friend_total_fasts"] == 1
    assert friend["friend_current_streak"] == 1

    search = client.get("/social/search", params={"q": "bo"}, headers=alice_headers).json()
    assert search["users"][0]["relationship"] == "friend"

    assert client.delete("/social/friends/bob", headers=alice_headers).status_code == 200
    assert client.get("/social/friends/list", headers=alice_headers).json()["total_count"] == 0


def test_friend_request_needs_own_username(client):
    _, headers = register(client)
    _, other_headers = register(client)
    set_username(client, other_headers, "target")
    response = client.post("/social/friends/request", json={"recipient_username": "target"}, headers=headers)
    assert response.status_code == 400


def test_reject_and_cancel(client):
    (_, alice_headers), (_, bob_headers) = _friends(client)
    first = client.post("/social/friends/request", json={"recipient_username": "bob"}, headers=alice_headers).json()
    assert client.post(f"/social/friends/request/{first['id']}/reject", headers=bob_headers).status_code == 200

    second = client.post("/social/friends/request", json={"recipient_username": "bob"}, headers=alice_headers).json()
    assert client.delete(f"/social/friends/request/{second['id']}", headers=alice_headers).status_code == 200
    assert client.delete(f"/social/friends/request/{second['id']}", headers=alice_headers).status_code == 404


def test_private_profile_hidden(client):
    (alice, alice_headers), (_, bob_headers) = _friends(client)
    assert client.get(f"/social/profile/{alice['id']}", headers=bob_headers).status_code == 200
    client.put("/social/profile", json={"is_public": False}, headers=alice_headers)
    assert client.get(f"/social/profile/{alice['id']}", headers=bob_headers).status_code == 404


def test_global_leaderboard(client):
    (alice, alice_headers), (bob, bob_headers) = _friends(client)
    save_fast(client, alice_headers, 16, fast_id="a1")
    save_fast(client, alice_headers, 16, ended_ago_ms=30 * 3_600_000, fast_id="a2")
    save_fast(client, bob_headers, 20, fast_id="b1")
    _, idle_headers = register(client)

    board = client.get("/social/leaderboard", params={"type": "fasts", "period": "all"}, headers=bob_headers).json()
    assert [e["user_id"] for e in board["leaderboard"]] == [alice["id"], bob["id"]]
    assert board["leaderboard"][0]["value"] == 2
    assert board["leaderboard"][1]["is_current_user"] is True

    hours = client.get("/social/leaderboard", params={"type": "hours", "period": "week"}, headers=idle_headers).json()
    assert hours["leaderboard"][0]["value"] == 32

    client.put("/social/profile", json={"show_on_leaderboard": False}, headers=alice_headers)
    board = client.get("/social/leaderboard", params={"type": "fasts"}, headers=bob_headers).json()
    assert [e["user_id"] for e in board["leaderboard"]] == [bob["id"]]


def test_leaderboard_validates_params(client, auth_headers):
    assert client.get("/social/leaderboard", params={"type": "calories"}, headers=auth_headers).status_code == 400
    assert client.get("/social/leaderboard", params={"period": "decade"}, headers=auth_headers).status_code == 400
    assert client.get("/social/leaderboard", params={"challenge_id": "missing"}, headers=auth_headers).status_code == 404


def test_feed_visibility_and_likes(client):
    (_, alice_headers), (_, bob_headers) = _friends(client)
    private = client.post("/social/feed", json={"content": "friends only"}, headers=alice_headers)
    assert private.status_code == 201
    assert private.json()["visibility"] == "friends"
    public = client.post("/social/feed", json={"content": "hello", "visibility": "public"}, headers=alice_headers).json()

    seen = {p["id"] for p in client.get("/social/feed", headers=bob_headers).json()["posts"]}
    assert seen == {public["id"]}

    assert client.post(f"/social/feed/{public['id']}/like", headers=bob_headers).status_code == 200
    assert client.post(f"/social/feed/{public['id']}/like", headers=bob_headers).status_code == 400
    post = client.get("/social/feed", params={"type": "public"}, headers=bob_headers).json()["posts"][0]
    assert post["likes_count"] == 1
    assert post["is_liked"] is True
    assert client.delete(f"/social/feed/{public['id']}/like", headers=bob_headers).status_code == 200

    assert client.delete(f"/social/feed/{public['id']}", headers=bob_headers).status_code == 404
    assert client.delete(f"/social/feed/{public['id']}", headers=alice_headers).status_code == 200
    assert client.post("/social/feed/missing/like", headers=bob_headers).status_code == 404
