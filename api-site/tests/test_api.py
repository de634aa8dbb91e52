import pytest
from sqlalchemy.exc import OperationalError

from siteapi.api.middlewares.security_headers import SECURITY_HEADERS
from siteapi.repositories.user_repository import UserRepository

EMAIL = "a@b.com"
PASSWORD = "password123"


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _register(client, email=EMAIL, password=PASSWORD, **extra):
    body = {"email": email, "password": password, "password_confirmation": password}
    body.update(extra)
    return client.post("/api/auth/register", json=body)


def _login(client, email=EMAIL, password=PASSWORD, **kwargs):
    return client.post("/api/auth/login", json={"email": email, "password": password}, **kwargs)


def _make_admin(database, email):
    with database.session() as session:
        user = UserRepository(session).get_by_email(email)
        user.role.role = "admin"


@pytest.fixture()
def admin_token(client, database):
    _register(client, email="admin@site.com")
    _make_admin(database, "admin@site.com")
    resp = _login(client, email="admin@site.com")
    assert resp.status_code == 200, resp.get_data(as_text=True)
    return resp.get_json()["data"]["access_token"]


def test_register_then_me(client):
    resp = _register(client, full_name="Ana")
    assert resp.status_code == 201, resp.get_data(as_text=True)

    body = resp.get_json()
    assert body["success"] is True
    assert body["message"] == "Registration successful"
    assert body["data"]["token_type"] == "Bearer"
    assert body["data"]["expires_in"] == 3600

    me = client.get("/api/auth/me", headers=_auth(body["data"]["access_token"]))
    assert me.status_code == 200

    user = me.get_json()["data"]
    assert user["email"] == EMAIL
    assert user["role"] == "user"
    assert user["full_name"] == "Ana"
    assert not any("password" in key for key in user)


def test_register_password_mismatch(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": EMAIL, "password": PASSWORD, "password_confirmation": "different123"},
    )
    assert resp.status_code == 422
    body = resp.get_json()
    assert body["success"] is False
    assert "password_confirmation" in body["errors"]


def test_register_validation_errors(client):
    resp = client.post("/api/auth/register", json={"email": "not-an-email", "password": "short"})
    assert resp.status_code == 422

    errors = resp.get_json()["errors"]
    assert "email" in errors
    assert "password" in errors
    assert "password_confirmation" in errors


def test_register_duplicate_email(client):
    _register(client)
    resp = _register(client)

    assert resp.status_code == 409
    assert resp.get_json()["message"] == "Email already registered"


def test_login_failures_share_one_message(client):
    _register(client)

    unknown = _login(client, email="nobody@site.com")
    wrong = _login(client, password="wrong-password")

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.get_json() == wrong.get_json() == {"success": False, "message": "Invalid email or password"}


def test_login_rate_limit(client):
    _register(client)

    statuses = [_login(client, password="wrong-password").status_code for _ in range(5)]
    limited = _login(client)

    assert statuses == [401] * 5
    assert limited.status_code == 429
    assert limited.get_json()["message"] == "Too many login attempts. Please try again later."
    assert limited.headers["X-RateLimit-Remaining"] == "0"


def test_login_rate_limit_resets_after_window(client, clock):
    _register(client)
    for _ in range(5):
        _login(client, password="wrong-password")
    assert _login(client).status_code == 429

    clock.advance(301)

    assert _login(client).status_code == 200


def test_login_limit_is_per_ip(client):
    _register(client)
    for _ in range(5):
        _login(client, password="wrong-password")

    other = _login(client, headers={"X-Forwarded-For": "8.8.8.8"})
    assert other.status_code == 200


def test_refresh_rotation_over_http(client):
    tokens = _register(client).get_json()["data"]

    first = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert first.status_code == 200
    assert first.get_json()["message"] == "Token refreshed successfully"

    replay = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert replay.status_code == 401
    assert replay.get_json()["message"] == "Invalid or expired refresh token"


def test_refresh_requires_token(client):
    resp = client.post("/api/auth/refresh", json={})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Refresh token is required"


def test_logout_revokes_refresh_tokens(client):
    tokens = _register(client).get_json()["data"]

    resp = client.post("/api/auth/logout", headers=_auth(tokens["access_token"]))
    assert resp.status_code == 200

    refresh = client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refresh.status_code == 401


@pytest.mark.parametrize(
    "headers",
    [{}, {"Authorization": "Bearer garbage"}, {"Authorization": "Token abc"}],
)
def test_me_requires_valid_token(client, headers):
    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Not authenticated"


def test_refresh_token_is_not_a_bearer_token(client):
    tokens = _register(client).get_json()["data"]

    resp = client.get("/api/auth/me", headers=_auth(tokens["refresh_token"]))
    assert resp.status_code == 401


def test_change_password(client):
    tokens = _register(client).get_json()["data"]
    headers = _auth(tokens["access_token"])

    wrong = client.post(
        "/api/auth/password",
        headers=headers,
        json={"current_password": "nope", "password": "new-password-1", "password_confirmation": "new-password-1"},
    )
    assert wrong.status_code == 401

    ok = client.post(
        "/api/auth/password",
        headers=headers,
        json={"current_password": PASSWORD, "password": "new-password-1", "password_confirmation": "new-password-1"},
    )
    assert ok.status_code == 200
    assert _login(client, password="new-password-1").status_code == 200


def test_admin_routes_need_admin_role(client):
    tokens = _register(client).get_json()["data"]

    resp = client.get("/api/users", headers=_auth(tokens["access_token"]))
    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Insufficient permissions"


def test_admin_lists_and_deactivates_users(client, admin_token):
    user = _register(client).get_json()["data"]

    listing = client.get("/api/users?limit=10", headers=_auth(admin_token))
    assert listing.status_code == 200
    data = listing.get_json()["data"]
    assert data["total"] == 2
    assert data["limit"] == 10
    assert {u["email"] for u in data["items"]} == {EMAIL, "admin@site.com"}

    resp = client.patch(
        f"/api/users/{user['user']['id']}/status",
        headers=_auth(admin_token),
        json={"is_active": False},
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["is_active"] is False

    # token já emitido deixa de valer
    assert client.get("/api/auth/me", headers=_auth(user["access_token"])).status_code == 401
    assert _login(client).status_code == 401

    audit = client.get(f"/api/users/{user['user']['id']}/audit", headers=_auth(admin_token))
    assert audit.status_code == 200
    assert "REGISTERED" in {e["action_name"] for e in audit.get_json()["data"]}


def test_admin_status_unknown_user(client, admin_token):
    resp = client.patch("/api/users/missing/status", headers=_auth(admin_token), json={"is_active": False})
    assert resp.status_code == 404


def test_admin_blocks_and_unblocks_ip(client, admin_token):
    blocked = client.post(
        "/api/security/blocked-ips",
        headers=_auth(admin_token),
        json={"ip_address": "8.8.8.8", "duration_seconds": 600},
    )
    assert blocked.status_code == 201

    from_blocked = client.get("/api/auth/me", headers={"X-Forwarded-For": "8.8.8.8"})
    assert from_blocked.status_code == 403
    assert from_blocked.get_json()["message"] == "Your IP has been temporarily blocked"

    unblocked = client.delete("/api/security/blocked-ips/8.8.8.8", headers=_auth(admin_token))
    assert unblocked.status_code == 200

    again = client.delete("/api/security/blocked-ips/8.8.8.8", headers=_auth(admin_token))
    assert again.status_code == 404


def test_private_ip_cannot_be_blocked(client, admin_token):
    resp = client.post(
        "/api/security/blocked-ips",
        headers=_auth(admin_token),
        json={"ip_address": "10.0.0.1"},
    )
    assert resp.status_code == 400


def test_gate_sets_rate_limit_and_security_headers(client):
    resp = client.get("/api/auth/me")

    assert resp.headers["X-RateLimit-Limit"] == "100"
    assert resp.headers["X-RateLimit-Remaining"] == "99"
    for name, value in SECURITY_HEADERS.items():
        assert resp.headers[name] == value


def test_gate_refuses_after_limit(app, client, settings):
    settings.rate_limit_requests = 2

    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me").status_code == 401

    resp = client.get("/api/auth/me")
    assert resp.status_code == 429
    assert resp.get_json()["message"] == "Rate limit exceeded. Please try again later."


def test_gate_auto_blocks_repeat_offenders(client, settings):
    settings.rate_limit_requests = 1
    settings.rate_limit_block_threshold = 2

    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me").status_code == 429
    assert client.get("/api/auth/me").status_code == 429

    resp = client.get("/api/auth/me")
    assert resp.status_code == 403


def test_health_is_not_rate_limited(client, settings):
    settings.rate_limit_requests = 1

    for _ in range(3):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert "X-RateLimit-Limit" not in resp.headers

    assert client.get("/health/db").get_json() == {"db": "ok"}


def test_health_reports_environment(client, settings):
    assert client.get("/health").get_json() == {"status": "ok", "environment": settings.environment}


def test_health_db_is_503_when_database_fails(client, database, monkeypatch):
    def broken_session():
        raise OperationalError("select 1", {}, Exception("connection refused"))

    monkeypatch.setattr(database, "session", broken_session)

    resp = client.get("/health/db")
    assert resp.status_code == 503
    assert resp.get_json() == {"db": "unavailable"}


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_unexpected_errors_hide_details_outside_debug(app, client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("database exploded")

    monkeypatch.setattr("siteapi.services.auth_service.AuthService.login", boom)

    resp = _login(client)
    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Internal server error"}
