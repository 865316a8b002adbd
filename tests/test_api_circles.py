from tests.helpers import register


def _create(client, headers, **overrides):
    payload = {"name": "Morning fasters", "description": "16:8 crew", "is_private": True}
    payload.update(overrides)
    return client.post("/social/circles", json=payload, headers=headers)


def test_create_makes_creator_admin(client, auth_headers):
    assert _create(client, auth_headers, name=" a ").status_code == 400

    response = _create(client, auth_headers)
    assert response.status_code == 201
    circle = response.json()
    assert circle["user_role"] == "admin"
    assert circle["member_count"] == 1
    assert circle["max_members"] == 10
    assert len(circle["invite_code"]) == 6

    listing = client.get("/social/circles", headers=auth_headers).json()
    assert [c["id"] for c in listing["circles"]] == [circle["id"]]


def test_lookup_and_join_by_invite_code(client, auth_headers):
    circle = _create(client, auth_headers).json()
    _, other = register(client, display_name="Sam")

    assert client.get("/social/circles/lookup", params={"code": "abc"}, headers=other).status_code == 400
    assert client.get("/social/circles/lookup", params={"code": "ZZZZZZ"}, headers=other).status_code == 404
    preview = client.get("/social/circles/lookup", params={"code": circle["invite_code"].lower()}, headers=other).json()
    assert preview["id"] == circle["id"]
    assert preview["member_count"] == 1
    assert "invite_code" not in preview

    # Private circles can't be joined by id alone
    assert client.post("/social/circles/join", json={"circle_id": circle["id"]}, headers=other).status_code == 404

    joined = client.post("/social/circles/join", json={"invite_code": circle["invite_code"]}, headers=other)
    assert joined.status_code == 200
    assert joined.json()["circle_id"] == circle["id"]
    again = client.post("/social/circles/join", json={"invite_code": circle["invite_code"]}, headers=other)
    assert again.status_code == 400

    detail = client.get(f"/social/circles/{circle['id']}", headers=other).json()
    assert [m["role"] for m in detail["members"]] == ["admin", "member"]
    assert detail["circle"]["user_role"] == "member"

    messages = client.get(f"/social/circles/{circle['id']}/messages", headers=auth_headers).json()["messages"]
    assert messages[-1]["type"] == "system"
    assert messages[-1]["content"] == "Sam joined the circle"


def test_public_circle_joinable_by_id_until_full(client, auth_headers):
    circle = _create(client, auth_headers, is_private=False, max_members=2).json()
    _, second = register(client)
    _, third = register(client)

    assert client.post("/social/circles/join", json={}, headers=second).status_code == 400
    assert client.post("/social/circles/join", json={"circle_id": circle["id"]}, headers=second).status_code == 200
    full = client.post("/social/circles/join", json={"circle_id": circle["id"]}, headers=third)
    assert full.status_code == 400
    assert full.json()["detail"] == "Circle is full"


def test_non_members_are_kept_out(client, auth_headers):
    circle = _create(client, auth_headers).json()
    _, outsider = register(client)

    assert client.get(f"/social/circles/{circle['id']}", headers=outsider).status_code == 403
    assert client.get(f"/social/circles/{circle['id']}/messages", headers=outsider).status_code == 403
    posted = client.post(f"/social/circles/{circle['id']}/messages", json={"content": "hi"}, headers=outsider)
    assert posted.status_code == 403
    assert client.get("/social/circles/missing", headers=outsider).status_code == 404


def test_messages_validation_and_paging(client, auth_headers):
    circle = _create(client, auth_headers).json()
    url = f"/social/circles/{circle['id']}/messages"

    assert client.post(url, json={"content": "   "}, headers=auth_headers).status_code == 400
    assert client.post(url, json={"content": "x" * 2001}, headers=auth_headers).status_code == 400
    assert client.post(url, json={"content": "sneaky", "type": "system"}, headers=auth_headers).status_code == 400

    for i in range(5):
        response = client.post(url, json={"content": f"message {i}"}, headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["is_own"] is True

    page = client.get(url, params={"limit": 3}, headers=auth_headers).json()
    assert [m["content"] for m in page["messages"]] == ["message 2", "message 3", "message 4"]
    assert page["has_more"] is True

    older = client.get(
        url, params={"limit": 3, "before": page["messages"][0]["created_at"]}, headers=auth_headers
    ).json()
    assert [m["content"] for m in older["messages"]] == ["message 0", "message 1"]
    assert older["has_more"] is False

    listing = client.get("/social/circles", headers=auth_headers).json()
    assert listing["circles"][0]["last_message"]["content"] == "message 4"


def test_message_deletion_rights(client, auth_headers):
    circle = _create(client, auth_headers).json()
    _, member = register(client)
    client.post("/social/circles/join", json={"invite_code": circle["invite_code"]}, headers=member)
    url = f"/social/circles/{circle['id']}/messages"

    admin_message = client.post(url, json={"content": "welcome"}, headers=auth_headers).json()
    member_message = client.post(url, json={"content": "thanks"}, headers=member).json()

    assert client.delete(f"{url}/{admin_message['id']}", headers=member).status_code == 403
    assert client.delete(f"{url}/{member_message['id']}", headers=auth_headers).status_code == 200
    assert client.delete(f"{url}/{member_message['id']}", headers=auth_headers).status_code == 404


def test_admin_must_hand_over_before_leaving(client, auth_headers):
    circle = _create(client, auth_headers).json()
    member_user, member = register(client)
    client.post("/social/circles/join", json={"invite_code": circle["invite_code"]}, headers=member)
    leave_url = f"/social/circles/{circle['id']}/membership"

    refused = client.delete(leave_url, headers=auth_headers)
    assert refused.status_code == 400
    assert refused.json()["detail"] == "Transfer admin role before leaving"

    role_url = f"/social/circles/{circle['id']}/members/{member_user['id']}"
    assert client.put(role_url, json={"role": "admin"}, headers=member).status_code == 403
    promoted = client.put(role_url, json={"role": "admin"}, headers=auth_headers)
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "admin"

    assert client.delete(leave_url, headers=auth_headers).status_code == 200
    assert client.get(f"/social/circles/{circle['id']}", headers=auth_headers).status_code == 403

    # Sole admin can't demote themselves
    assert client.put(role_url, json={"role": "member"}, headers=member).status_code == 400


def test_last_member_leaving_deletes_circle(client, auth_headers):
    circle = _create(client, auth_headers).json()
    assert client.delete(f"/social/circles/{circle['id']}/membership", headers=auth_headers).status_code == 200
    assert client.get(f"/social/circles/{circle['id']}", headers=auth_headers).status_code == 404
    assert client.delete(f"/social/circles/{circle['id']}/membership", headers=auth_headers).status_code == 404


def test_update_and_delete_permissions(client, auth_headers):
    circle = _create(client, auth_headers).json()
    _, member = register(client)
    _, other = register(client)
    client.post("/social/circles/join", json={"invite_code": circle["invite_code"]}, headers=member)
    client.post("/social/circles/join", json={"invite_code": circle["invite_code"]}, headers=other)
    url = f"/social/circles/{circle['id']}"

    assert client.put(url, json={"name": "Ours now"}, headers=member).status_code == 403
    assert client.put(url, json={"max_members": 2}, headers=auth_headers).status_code == 400
    updated = client.put(url, json={"name": "  Evening fasters ", "is_private": False}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.json()["name"] == "Evening fasters"
    assert updated.json()["is_private"] is False
    assert updated.json()["description"] == "16:8 crew"

    assert client.delete(url, headers=member).status_code == 403
    assert client.delete(url, headers=auth_headers).status_code == 200
    assert client.get(url, headers=auth_headers).status_code == 404
