"""
Tests for the auth endpoints: signup, login, logout and current user.
"""

import pytest


def _signup(client, email="a@b.com", password="abcdef", **extra):
    return client.post("/api/auth/signup", json={"email": email, "password": password, **extra})


def _login(client, email="a@b.com", password="abcdef") -> str:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["data"]["session"]["access_token"]


class TestSignup:
    def test_empty_body_requires_fields(self, client) -> None:
        resp = client.post("/api/auth/signup", json={})
        body = resp.json()

        assert resp.status_code == 400
        assert body["success"] is False
        assert "required" in body["error"]

    def test_valid_signup(self, client, fake_db) -> None:
        resp = _signup(client)
        body = resp.json()

        assert resp.status_code == 201
        assert body["success"] is True
        assert body["data"]["user"]["email"] == "a@b.com"
        assert "check your email" in body["data"]["message"]

        profiles = fake_db.store.rows("user_profiles")
        assert len(profiles) == 1
        assert profiles[0]["name"] == "a"
        assert profiles[0]["id"] == body["data"]["user"]["id"]

    def test_name_is_stored(self, client, fake_db) -> None:
        _signup(client, name="Ada")
        assert fake_db.store.rows("user_profiles")[0]["name"] == "Ada"

    @pytest.mark.parametrize(
        "email, password, message",
        [
            ("not-an-email", "abcdef", "Invalid email format"),
            ("a@b.com", "abc", "Password must be at least 6 characters long"),
        ],
    )
    def test_rejects_bad_input(self, client, email, password, message) -> None:
        resp = _signup(client, email=email, password=password)
        assert resp.status_code == 400
        assert resp.json()["error"] == message

    def test_provider_rejection_is_validation_error(self, client) -> None:
        _signup(client)
        resp = _signup(client)
        assert resp.status_code == 400
        assert resp.json()["error"] == "User already registered"

    def test_profile_failure_does_not_fail_signup(self, client, fake_db) -> None:
        fake_db.store.fail("user_profiles", "insert", {"code": "42501", "message": "permission denied"})
        resp = _signup(client)
        assert resp.status_code == 201
        assert fake_db.store.rows("user_profiles") == []


class TestLogin:
    def test_missing_fields(self, client) -> None:
        resp = client.post("/api/auth/login", json={"email": "a@b.com"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Email and password are required"

    def test_bad_credentials_are_unauthorized(self, client) -> None:
        _signup(client)
        resp = client.post("/api/auth/login", json={"email": "a@b.com", "password": "wrong-pass"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid login credentials"

    def test_returns_user_and_session(self, client) -> None:
        _signup(client)
        resp = client.post("/api/auth/login", json={"email": "a@b.com", "password": "abcdef"})
        data = resp.json()["data"]

        assert data["user"]["email"] == "a@b.com"
        assert data["session"]["access_token"]
        assert resp.headers["Cache-Control"] == "no-store"


class TestMe:
    def test_unauthenticated(self, client) -> None:
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json()["error"] == "Not authenticated"

    def test_invalid_token(self, client) -> None:
        resp = client.get("/api/auth/me", headers={"Authorization": "Bearer forged"})
        assert resp.status_code == 401

    def test_merges_profile(self, client) -> None:
        _signup(client, name="Ada")
        token = _login(client)

        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        data = resp.json()["data"]

        assert resp.status_code == 200
        assert data["email"] == "a@b.com"
        assert data["name"] == "Ada"

    def test_profile_lookup_failure_degrades(self, client, fake_db) -> None:
        _signup(client)
        token = _login(client)
        fake_db.store.fail("user_profiles", "select", {"code": "42P01", "message": "missing table"})

        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        data = resp.json()["data"]

        assert resp.status_code == 200
        assert data["email"] == "a@b.com"
        assert "name" not in data


class TestLogout:
    def test_without_token_is_noop(self, client) -> None:
        resp = client.post("/api/auth/logout")
        assert resp.status_code == 200
        assert resp.json()["data"] == {"message": "Logged out successfully"}

    def test_revokes_session(self, client) -> None:
        _signup(client)
        token = _login(client)
        headers = {"Authorization": f"Bearer {token}"}

        assert client.post("/api/auth/logout", headers=headers).status_code == 200
        assert client.get("/api/auth/me", headers=headers).status_code == 401

    def test_provider_failure_is_server_error(self, client) -> None:
        resp = client.post("/api/auth/logout", headers={"Authorization": "Bearer stale"})
        assert resp.status_code == 500
        assert resp.json()["error"] == "Invalid JWT"
