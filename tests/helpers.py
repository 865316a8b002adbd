import time
import uuid

HOUR_MS = 3_600_000
DAY_MS = 24 * HOUR_MS


def now_ms():
    return int(time.time() * 1000)


def register(client, email=None, password="secret-pass-1", display_name="Tester"):
    email = email or f"user-{uuid.uuid4().hex[:8]}@example.com"
    response = client.post("/auth/register", json={
        "email": email,
        "password": password,
        "display_name": display_name,
    })
    assert response.status_code == 201, response.text
    body = response.json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}


def set_username(client, headers, username):
    response = client.put("/social/profile", json={"username": username}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def fast_payload(hours, ended_ago_ms=HOUR_MS, fast_id=None, completed=True):
    end = now_ms() - ended_ago_ms
    return {
        "id": fast_id or uuid.uuid4().hex,
        "start_time": end - int(hours * HOUR_MS),
        "end_time": end,
        "target_duration": 16,
        "completed": completed,
    }


def save_fast(client, headers, hours, ended_ago_ms=HOUR_MS, fast_id=None, completed=True):
    return client.post("/fasts", json=fast_payload(hours, ended_ago_ms, fast_id, completed), headers=headers)
