from tests.helpers import register


def test_register_returns_user_and_token(client):
    response = client.post("/auth/register", json={
        "email": "Person@Example.com",
        "password": "long-enough",
        "display_name": "Person",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["user"]["email"] == "person@example.com"
    assert body["token"]


def test_register_creates_profile(client, auth_headers):
    response = client.get("/auth/me", headers=auth_headers)
    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile["display_name"] == "Tester"
    assert profile["unlocked_badges"] == []


def test_duplicate_email_conflicts(client):
    register(client, email="dup@example.com")
    response = client.post("/auth/register", json={"email": "DUP@example.com", "password": "long-enough"})
    assert response.status_code == 409


def test_invalid_email_and_short_password_rejected(client):
    assert client.post("/auth/register", json={"email": "not-an-email", "password": "long-enough"}).status_code == 400
    assert client.post("/auth/register", json={"email": "a@example.com", "password": "short"}).status_code == 400


def test_login(client):
    register(client, email="login@example.com", password="correct-horse")
    ok = client.post("/auth/login", json={"email": "login@example.com", "password": "correct-horse"})
    assert ok.status_code == 200
    assert ok.json()["token"]

    bad = client.post("/auth/login", json={"email": "login@example.com", "password": "wrong-horse"})
    assert bad.status_code == 401


def test_protected_routes_need_token(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/fasts", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
