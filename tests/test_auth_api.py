"""Auth endpoints and the shared error envelope."""

import pytest

import services.auth as auth_module
from api import create_app

REGISTER = {
    "email": "ada@example.com",
    "password": "Passw0rd!",
    "first_name": "Ada",
    "last_name": "Lovelace",
}


def register(client, **overrides):
    return client.post("/api/v1/auth/register", json={**REGISTER, **overrides})


def test_health(client):
    res = client.get("/api/v1/health")
    assert res.status_code == 200
    assert res.get_json()["status"] == "ok"


def test_register_returns_tokens(client):
    res = register(client)
    assert res.status_code == 201
    data = res.get_json()["data"]
    assert data["access_token"] and data["refresh_token"]
    assert data["user"]["email"] == "ada@example.com"
    assert "password_hash" not in data["user"]
    assert "otp" not in data["user"]
    assert "password" not in data["user"]


def test_register_strips_email_whitespace(client):
    res = register(client, email="  ada@example.com ")
    assert res.status_code == 201
    assert res.get_json()["data"]["user"]["email"] == "ada@example.com"


def test_duplicate_register_is_conflict(client):
    assert register(client).status_code == 201
    res = register(client)
    assert res.status_code == 409
    body = res.get_json()
    assert body["error"] == "CONFLICT"
    assert body["message"] == "User with this email already exists"


@pytest.mark.parametrize("password", ["short1!", "alllowercase1!", "NoDigits!!", "NoSpecial123"])
def test_weak_password_rejected(client, password):
    res = register(client, password=password)
    assert res.status_code == 422
    body = res.get_json()
    assert body["error"] == "VALIDATION_ERROR"
    assert "password" in body["details"]


def test_unknown_fields_rejected(client):
    res = register(client, role="admin")
    assert res.status_code == 422
    assert "role" in res.get_json()["details"]


def test_error_envelope_shape(client):
    res = client.post("/api/v1/auth/login", json={"email": "nobody@example.com", "password": "x"})
    assert res.status_code == 401
    body = res.get_json()
    assert set(body) >= {"status", "timestamp", "path", "method", "error", "message"}
    assert body["status"] == 401
    assert body["path"] == "/api/v1/auth/login"
    assert body["method"] == "POST"
    assert body["error"] == "UNAUTHORIZED"


def test_login_failures_are_indistinguishable(client):
    register(client)
    unknown = client.post("/api/v1/auth/login", json={"email": "nobody@example.com", "password": "Passw0rd!"})
    wrong = client.post("/api/v1/auth/login", json={"email": "ada@example.com", "password": "Wrong0rd!"})
    assert unknown.status_code == wrong.status_code == 401
    for key in ("error", "message"):
        assert unknown.get_json()[key] == wrong.get_json()[key]


def test_unknown_email_still_verifies_a_hash(client, services, monkeypatch):
    checked = []

    def spy(password, password_hash, hasher=None):
        checked.append(password_hash)
        return True

    monkeypatch.setattr(auth_module, "verify_password", spy)
    res = client.post("/api/v1/auth/login", json={"email": "nobody@example.com", "password": "Passw0rd!"})
    assert res.status_code == 401
    assert checked == [services.auth.dummy_hash]


def test_welcome_email_escapes_names(client, outbox):
    register(client, first_name='<a href="http://evil.example">x</a>')
    html = outbox[-1]["html"]
    assert "<a href=\"http://evil.example\">" not in html
    assert "&lt;a href=&#34;http://evil.example&#34;&gt;x&lt;/a&gt;" in html


def test_register_login_refresh_flow(client, services):
    registered = register(client).get_json()["data"]
    login = client.post("/api/v1/auth/login", json={"email": "ada@example.com", "password": "Passw0rd!"})
    assert login.status_code == 200
    refresh_token = login.get_json()["data"]["refresh_token"]

    res = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
    assert res.status_code == 200
    access = res.get_json()["data"]["access_token"]

    claims = services.signer.verify_access(access)
    assert claims["sub"] == str(registered["user"]["id"])
    assert claims["email"] == "ada@example.com"
    assert claims["role"] == "learner"

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {access}"})
    assert me.status_code == 200
    assert me.get_json()["data"]["id"] == registered["user"]["id"]


def test_refresh_with_bad_token(client):
    res = client.post("/api/v1/auth/refresh", json={"refresh_token": "garbage"})
    assert res.status_code == 401
    assert res.get_json()["message"] == "Invalid refresh token"


def test_forgot_password_same_answer_for_unknown_email(client):
    register(client)
    known = client.post("/api/v1/auth/forgot-password", json={"email": "ada@example.com"})
    unknown = client.post("/api/v1/auth/forgot-password", json={"email": "ghost@example.com"})
    assert known.status_code == unknown.status_code == 200
    assert known.get_json()["data"] == unknown.get_json()["data"]


def test_reset_password_flow(client, services, outbox):
    tokens = register(client).get_json()["data"]
    client.post("/api/v1/auth/forgot-password", json={"email": "ada@example.com"})
    otp = services.auth.users.find_by_email("ada@example.com").otp

    res = client.post(
        "/api/v1/auth/reset-password",
        json={"email": "ada@example.com", "otp": otp, "new_password": "N3wPassw0rd!"},
    )
    assert res.status_code == 200

    stale = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert stale.status_code == 401
    login = client.post("/api/v1/auth/login", json={"email": "ada@example.com", "password": "N3wPassw0rd!"})
    assert login.status_code == 200


def test_reset_password_rejects_malformed_code(client):
    res = client.post(
        "/api/v1/auth/reset-password",
        json={"email": "ada@example.com", "otp": "12345", "new_password": "N3wPassw0rd!"},
    )
    assert res.status_code == 422


def test_logout_revokes_given_token(client):
    tokens = register(client).get_json()["data"]
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}
    res = client.post("/api/v1/auth/logout", json={"refresh_token": tokens["refresh_token"]}, headers=headers)
    assert res.status_code == 200

    again = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert again.status_code == 401


def test_logout_requires_access_token(client):
    tokens = register(client).get_json()["data"]
    res = client.post("/api/v1/auth/logout", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})
    assert res.status_code == 401


def test_missing_bearer_header(client):
    res = client.get("/api/v1/auth/me")
    assert res.status_code == 401
    assert res.get_json()["error"] == "UNAUTHORIZED"


def test_unknown_route_uses_envelope(client):
    res = client.get("/api/v1/does-not-exist")
    assert res.status_code == 404
    assert res.get_json()["error"] == "NOT_FOUND"


def test_app_refuses_shared_secrets():
    with pytest.raises(RuntimeError):
        create_app("testing", JWT_ACCESS_SECRET="one-secret-for-both-0123456789ab",
                   JWT_REFRESH_SECRET="one-secret-for-both-0123456789ab")
