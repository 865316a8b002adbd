def test_settings_default_and_update(client, auth_headers):
    defaults = client.get("/notifications/settings", headers=auth_headers).json()
    assert defaults["reminder_hour"] == 20
    assert defaults["fast_reminder"] is True

    updated = client.put("/notifications/settings", json={"reminder_hour": 7, "daily_motivation": False}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.json()["reminder_hour"] == 7
    assert updated.json()["daily_motivation"] is False
    assert updated.json()["streak_at_risk"] is True

    assert client.put("/notifications/settings", json={"reminder_hour": 24}, headers=auth_headers).status_code == 422


def test_device_registration(client, auth_headers):
    first = client.post("/notifications/devices", json={"token": "tok-1", "platform": "ios"}, headers=auth_headers)
    assert first.status_code == 200
    client.post("/notifications/devices", json={"token": "tok-2", "platform": "ios"}, headers=auth_headers)

    devices = client.get("/notifications/devices", headers=auth_headers).json()["devices"]
    assert [d["token"] for d in devices] == ["tok-2"]

    assert client.delete("/notifications/devices", params={"token": "tok-2"}, headers=auth_headers).status_code == 200
    assert client.delete("/notifications/devices", params={"token": "nope"}, headers=auth_headers).status_code == 404
    assert client.post("/notifications/devices", json={"token": "t", "platform": "pager"}, headers=auth_headers).status_code == 422
