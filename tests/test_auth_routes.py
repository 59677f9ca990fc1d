"""Tests for registration, login, logout and the current-user endpoints."""

import hashlib
import secrets

import pytest
from fastapi.testclient import TestClient

from conftest import COOKIE_NAME, STRONG_PASSWORD, login, register, session_cookie


class TestRegister:
    def test_register_student_returns_user_and_session(self, client):
        response = register(client, "alice")

        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "alice"
        assert body["role"] == "student"
        assert body["email"] == "alice@campus.edu"
        assert "createdAt" in body
        assert "password" not in body
        assert session_cookie(client)

        me = client.get("/api/user")
        assert me.status_code == 200
        assert me.json()["id"] == body["id"]

    def test_register_creates_student_profile(self, client):
        register(client, "alice")

        profile = client.get("/api/user/profile").json()
        assert profile["user"]["username"] == "alice"
        assert profile["student"]["department"] == "Computer Science"
        assert profile["student"]["graduationYear"] == 2025
        assert profile["employer"] is None

    def test_register_creates_unapproved_employer_profile(self, client):
        register(client, "acme", role="employer")

        profile = client.get("/api/user/profile").json()
        assert profile["employer"]["companyName"] == "Acme Ltd"
        assert profile["employer"]["isApproved"] is False
        assert profile["student"] is None

    def test_admin_has_no_profile(self, client):
        register(client, "root", role="admin")

        profile = client.get("/api/user/profile").json()
        assert profile["student"] is None
        assert profile["employer"] is None

    def test_duplicate_username_rejected(self, client):
        assert register(client, "alice").status_code == 201

        response = register(client, "alice", email="other@campus.edu")
        assert response.status_code == 400
        assert response.json()["message"] == "Username already exists"

    def test_duplicate_email_rejected(self, client):
        assert register(client, "alice").status_code == 201

        response = register(client, "alice2", email="alice@campus.edu")
        assert response.status_code == 400
        assert response.json()["message"] == "Email already exists"

    @pytest.mark.parametrize("password,message", [
        ("Short1", "at least 8"),
        ("alllowercase1", "uppercase"),
        ("NoDigitsHere", "number"),
    ])
    def test_weak_password_rejected(self, client, password, message):
        response = register(client, "alice", password=password)

        assert response.status_code == 400
        body = response.json()
        assert message in body["message"]
        assert body["errors"][0]["field"] == "password"

    def test_invalid_email_rejected(self, client):
        response = register(client, "alice", email="not-an-email")

        assert response.status_code == 400
        assert any(e["field"] == "email" for e in response.json()["errors"])

    def test_unknown_role_rejected(self, client):
        response = register(client, "alice", role="dean")

        assert response.status_code == 400
        assert any(e["field"] == "role" for e in response.json()["errors"])

    def test_registration_is_atomic(self, app, storage, monkeypatch):
        from placement_portal.services.storage import DatabaseStorage

        def broken_insert(self, db, user_id, details):
            raise RuntimeError("profile insert failed")

        monkeypatch.setattr(DatabaseStorage, "_insert_employer", broken_insert)

        with TestClient(app, raise_server_exceptions=False) as client:
            response = register(client, "acme", role="employer")

        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error"}
        assert storage.get_user_by_username("acme") is None


class TestLogin:
    def test_login_with_correct_credentials(self, client):
        register(client, "alice")

        response = login(client, "alice")
        assert response.status_code == 200
        assert response.json()["username"] == "alice"
        assert client.get("/api/user").status_code == 200

    def test_wrong_password(self, client):
        register(client, "alice")

        response = login(client, "alice", "WrongPassword9")
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"
        assert session_cookie(client) is None

    def test_unknown_username(self, client):
        response = login(client, "nobody")
        assert response.status_code == 401

    def test_login_issues_new_session(self, client):
        register(client, "alice")
        first = session_cookie(client)

        login(client, "alice")
        assert session_cookie(client) != first

    @pytest.fixture
    def legacy_user(self, storage):
        """A user carried over with a `<hex digest>.<hex salt>` scrypt hash."""
        salt = secrets.token_hex(16)
        digest = hashlib.scrypt(STRONG_PASSWORD.encode(), salt=salt.encode(), n=16384, r=8, p=1, dklen=64)
        return storage.create_user({
            "username": "carol",
            "password": f"{digest.hex()}.{salt}",
            "role": "student",
            "name": "Carol",
            "email": "carol@campus.edu",
        })

    def test_legacy_hash_accepted_and_upgraded(self, client, storage, legacy_user):
        response = login(client, "carol")
        assert response.status_code == 200
        assert storage.get_user_by_username("carol")["password"].startswith("$scrypt$")

        assert login(client, "carol").status_code == 200

    def test_legacy_hash_wrong_password(self, client, storage, legacy_user):
        assert login(client, "carol", "WrongPassword9").status_code == 401
        assert "$scrypt$" not in storage.get_user_by_username("carol")["password"]


class TestSession:
    def test_app_uses_injected_store(self, app, client, session_store):
        assert app.state.sessions.store is session_store

        register(client, "alice")
        assert len(session_store) == 1

    def test_current_user_requires_session(self, client):
        response = client.get("/api/user")
        assert response.status_code == 401
        assert response.json()["message"] == "Not authenticated"

    def test_forged_cookie_rejected(self, client):
        register(client, "alice")
        client.cookies.clear()

        response = client.get("/api/user", headers={"Cookie": f"{COOKIE_NAME}=forged.token.value"})
        assert response.status_code == 401

    def test_logout_destroys_server_side_session(self, client, session_store):
        register(client, "alice")
        token = session_cookie(client)
        assert len(session_store) == 1

        response = client.post("/api/logout")
        assert response.status_code == 200
        assert response.json() == {"message": "Logged out"}
        assert len(session_store) == 0

        client.cookies.clear()
        replay = client.get("/api/user", headers={"Cookie": f"{COOKIE_NAME}={token}"})
        assert replay.status_code == 401

    def test_logout_requires_session(self, client):
        assert client.post("/api/logout").status_code == 401

    def test_expired_session_rejected(self, client, session_store):
        register(client, "alice")
        token = session_cookie(client)

        # expire every stored session
        for session_id in list(session_store._sessions):
            session_store.set(session_id, {"user_id": 1}, ttl_seconds=0)

        client.cookies.clear()
        response = client.get("/api/user", headers={"Cookie": f"{COOKIE_NAME}={token}"})
        assert response.status_code == 401

    def test_password_is_stored_hashed(self, client, storage):
        register(client, "alice")

        stored = storage.get_user_by_username("alice")["password"]
        assert stored != STRONG_PASSWORD
        assert stored.startswith("$scrypt$")
