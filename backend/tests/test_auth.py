"""Tests for registration, login and bearer-token protection."""
import logging
from datetime import timedelta

from taskflow.security import issue_token
from tests.conftest import auth_headers, register_user


class TestRegister:

    def test_register_returns_user_and_token(self, client):
        user = register_user(client, name="Alice", email="Alice@Example.com")
        assert user["name"] == "Alice"
        assert user["email"] == "alice@example.com"
        assert user["token"]
        assert "password" not in user and "password_hash" not in user

    def test_fullname_is_accepted(self, client):
        resp = client.post("/api/auth/register", json={
            "fullname": "Alice Liddell",
            "email": "alice@example.com",
            "password": "secret123",
        })
        assert resp.status_code == 201
        assert resp.json()["user"]["name"] == "Alice Liddell"

    def test_duplicate_email_rejected(self, client):
        register_user(client, name="Alice", email="alice@example.com")
        resp = client.post("/api/auth/register", json={
            "name": "Other",
            "email": "ALICE@example.com",
            "password": "secret123",
        })
        assert resp.status_code == 400
        assert resp.json()["message"] == "User already exists with this email"

    def test_missing_name_rejected(self, client):
        resp = client.post("/api/auth/register", json={"email": "a@example.com", "password": "secret123"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["message"] == "Please provide name, email, and password"

    def test_short_password_rejected(self, client):
        resp = client.post("/api/auth/register", json={
            "name": "Alice", "email": "a@example.com", "password": "123",
        })
        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"

    def test_invalid_email_rejected(self, client):
        resp = client.post("/api/auth/register", json={
            "name": "Alice", "email": "not-an-email", "password": "secret123",
        })
        assert resp.status_code == 400


class TestLogin:

    def test_login(self, client):
        register_user(client, name="Alice", email="alice@example.com", password="secret123")
        resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["user"]["email"] == "alice@example.com"
        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
        assert me.status_code == 200

    def test_wrong_password(self, client):
        register_user(client, name="Alice", email="alice@example.com")
        resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-one"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid email or password"

    def test_unknown_email(self, client):
        resp = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "secret123"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid email or password"

    def test_failed_login_does_not_log_the_address(self, client, caplog):
        register_user(client, name="Alice", email="alice@example.com")
        with caplog.at_level(logging.WARNING, logger="taskflow.services.auth_service"):
            client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-one"})
        assert caplog.records
        assert "alice@example.com" not in caplog.text


class TestProtectedRoutes:

    def test_me(self, client):
        alice = register_user(client, name="Alice")
        resp = client.get("/api/auth/me", headers=auth_headers(alice))
        assert resp.status_code == 200
        assert resp.json()["user"]["user_id"] == alice["user_id"]

    def test_missing_token(self, client):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "Not authorized, no token", "code": "NOT_AUTHENTICATED"}

    def test_garbage_token(self, client):
        resp = client.get("/api/groups", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_expired_token(self, client):
        alice = register_user(client, name="Alice")
        token = issue_token(alice["user_id"], expires_in=timedelta(seconds=-1))
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert "expired" in resp.json()["message"]

    def test_token_for_unknown_user(self, client):
        token = issue_token("no-such-user")
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
