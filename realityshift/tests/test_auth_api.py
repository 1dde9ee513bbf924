from __future__ import annotations

from flask.testing import FlaskClient

from realityshift.interfaces.http.auth import AUTH_COOKIE

CREDENTIALS = {"email": "Alice@Example.com", "password": "secret123"}


def test_register_sets_session_cookie(client: FlaskClient) -> None:
    response = client.post("/api/auth/register", json=CREDENTIALS)

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["user"]["email"] == "alice@example.com"
    assert body["user"]["displayName"] == "alice"
    cookie = response.headers.get("Set-Cookie")
    assert cookie and f"{AUTH_COOKIE}=" in cookie
    assert "HttpOnly" in cookie
    assert "Path=/" in cookie


def test_register_duplicate_email_conflicts(client: FlaskClient) -> None:
    client.post("/api/auth/register", json=CREDENTIALS)

    response = client.post("/api/auth/register", json=CREDENTIALS)

    assert response.status_code == 409
    assert "already exists" in response.get_json()["error"]


def test_register_short_password_is_rejected(client: FlaskClient) -> None:
    response = client.post("/api/auth/register", json={"email": "bob@example.com", "password": "12345"})

    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert body["error"] == "Invalid input"
    messages = [error["message"] for error in body["details"]["errors"]]
    assert "Password must be at least 6 characters" in messages


def test_register_invalid_email_is_rejected(client: FlaskClient) -> None:
    response = client.post("/api/auth/register", json={"email": "not-an-email", "password": "secret123"})

    assert response.status_code == 400
    assert "email" in response.get_json()["details"]["fields"]


def test_login_round_trip(client: FlaskClient) -> None:
    client.post("/api/auth/register", json=CREDENTIALS)
    client.delete_cookie(AUTH_COOKIE)

    response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})

    assert response.status_code == 200
    assert response.get_json()["user"]["email"] == "alice@example.com"
    assert client.get_cookie(AUTH_COOKIE) is not None

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    user = me.get_json()["user"]
    assert user["isDemo"] is False
    assert user["onboardingCompleted"] is False
    assert user["expiresAt"]


def test_login_unknown_email(client: FlaskClient) -> None:
    response = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "secret123"})

    assert response.status_code == 401
    assert response.get_json() == {"success": False, "error": "Invalid credentials"}


def test_login_wrong_password(client: FlaskClient) -> None:
    client.post("/api/auth/register", json=CREDENTIALS)

    response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"})

    assert response.status_code == 401
    assert response.get_json()["error"] == "Invalid credentials"


def test_bearer_header_is_accepted(client: FlaskClient) -> None:
    client.post("/api/auth/register", json=CREDENTIALS)
    token = client.get_cookie(AUTH_COOKIE).value
    client.delete_cookie(AUTH_COOKIE)

    anonymous = client.get("/api/auth/me")
    bearer = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert anonymous.status_code == 401
    assert bearer.status_code == 200


def test_tampered_cookie_is_unauthorized(client: FlaskClient) -> None:
    client.set_cookie(AUTH_COOKIE, "eyJhbGciOiJIUzI1NiJ9.eyJ1c2VySWQiOiJ4In0.bad")

    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.get_json() == {"success": False, "error": "Unauthorized"}


def test_logout_clears_session(client: FlaskClient) -> None:
    client.post("/api/auth/register", json=CREDENTIALS)

    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert client.get_cookie(AUTH_COOKIE) is None
    assert client.get("/api/auth/me").status_code == 401


def test_demo_login_seeds_history_once(client: FlaskClient) -> None:
    response = client.post("/api/auth/demo")

    assert response.status_code == 200
    body = response.get_json()
    assert body["isDemo"] is True
    assert body["user"]["displayName"] == "Demo User"

    me = client.get("/api/auth/me").get_json()["user"]
    assert me["isDemo"] is True

    overview = client.get("/api/challenges").get_json()["data"]
    assert overview["streak"] == 5
    assert [c["title"] for c in overview["today"]] == ["Mindful Walking"]

    client.post("/api/auth/demo")
    goals = client.get("/api/goals").get_json()["data"]["goals"]
    assert len(goals) == 1


def test_login_is_rate_limited(app_factory) -> None:
    app = app_factory(enable_rate_limit=True, rate_limit_requests=2, rate_limit_window=60)
    payload = {"email": "ghost@example.com", "password": "secret123"}

    with app.test_client() as client:
        statuses = [client.post("/api/auth/login", json=payload).status_code for _ in range(3)]
        blocked = client.post("/api/auth/login", json=payload)

    assert statuses == [401, 401, 429]
    assert blocked.status_code == 429
    assert blocked.get_json() == {"success": False, "error": "Too many requests"}


def test_production_session_cookie_is_secure(app_factory) -> None:
    app = app_factory(app_env="production")

    with app.test_client() as client:
        response = client.post("/api/auth/register", json=CREDENTIALS)

    assert response.status_code == 200
    cookie = response.headers.get("Set-Cookie")
    assert f"{AUTH_COOKIE}=" in cookie
    assert "Secure" in cookie


def test_development_session_cookie_is_not_secure(client: FlaskClient) -> None:
    response = client.post("/api/auth/register", json=CREDENTIALS)

    assert "Secure" not in response.headers.get("Set-Cookie")
