"""Tests for registration, login and the bearer-token dependencies."""

from datetime import datetime, timedelta, timezone

import jwt
from fastapi.testclient import TestClient

from mallmap.db import Base, get_db, get_engine
from mallmap.main import create_app
from mallmap.security import create_token


class TestRegister:
    def test_register_returns_user_and_token(self, client):
        resp = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "Alice@Example.com", "password": "secret123"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["user"]["email"] == "alice@example.com"
        assert body["data"]["user"]["role"] == "user"
        assert "passwordHash" not in body["data"]["user"]
        assert body["data"]["token"]

    def test_duplicate_email_conflicts(self, client):
        payload = {"username": "alice", "email": "alice@example.com", "password": "secret123"}
        assert client.post("/api/auth/register", json=payload).status_code == 200
        resp = client.post("/api/auth/register", json={**payload, "username": "alice2"})
        assert resp.status_code == 409
        assert resp.json()["success"] is False

    def test_anonymous_admin_registration_is_forbidden(self, client):
        resp = client.post(
            "/api/auth/register",
            json={"username": "mallory", "email": "mallory@example.com", "password": "secret123", "role": "admin"},
        )
        assert resp.status_code == 403
        assert resp.json()["success"] is False

    def test_user_cannot_create_admin(self, client, user_headers):
        resp = client.post(
            "/api/auth/register",
            json={"username": "mallory", "email": "mallory@example.com", "password": "secret123", "role": "admin"},
            headers=user_headers,
        )
        assert resp.status_code == 403

    def test_admin_can_create_admin(self, client, admin_headers):
        resp = client.post(
            "/api/auth/register",
            json={"username": "second", "email": "second@example.com", "password": "secret123", "role": "admin"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["user"]["role"] == "admin"

    def test_short_password_rejected(self, client):
        resp = client.post(
            "/api/auth/register",
            json={"username": "bob", "email": "bob@example.com", "password": "123"},
        )
        assert resp.status_code == 400
        assert resp.json()["success"] is False
        assert "password" in resp.json()["message"]


class TestLogin:
    def _register(self, client):
        client.post(
            "/api/auth/register",
            json={"username": "carol", "email": "carol@example.com", "password": "secret123"},
        )

    def test_login_success_sets_last_login(self, client):
        self._register(client)
        resp = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "secret123"})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["token"]
        assert data["user"]["lastLogin"] is not None

    def test_wrong_password_and_unknown_email_share_message(self, client):
        self._register(client)
        wrong = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "nope-nope"})
        unknown = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
        assert wrong.status_code == 401
        assert unknown.status_code == 401
        assert wrong.json()["message"] == unknown.json()["message"] == "Invalid email or password"

    def test_disabled_account_cannot_login(self, client, admin_headers):
        self._register(client)
        users = client.get("/api/admin/users", params={"search": "carol"}, headers=admin_headers).json()
        user_id = users["data"]["users"][0]["id"]
        client.put(f"/api/admin/users/{user_id}/status", json={"isActive": False}, headers=admin_headers)

        resp = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "secret123"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid email or password"


class TestTokens:
    def test_me_returns_current_user(self, client, user_headers):
        resp = client.get("/api/auth/me", headers=user_headers)
        assert resp.status_code == 200
        assert resp.json()["data"]["user"]["username"] == "viewer"

    def test_missing_token(self, client):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json()["message"] == "No authentication token provided"

    def test_malformed_token(self, client):
        resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid token"

    def test_expired_token(self, client, settings):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            {"userId": 1, "email": "x@example.com", "role": "admin", "exp": past},
            settings.jwt_secret,
            algorithm="HS256",
        )
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Token has expired"

    def test_non_admin_is_forbidden(self, client, user_headers):
        resp = client.post("/api/admin/provinces", json={"name": "天津市", "code": "120000"}, headers=user_headers)
        assert resp.status_code == 403
        assert resp.json()["success"] is False


class TestAppSettings:
    def test_tokens_verify_with_app_settings(self, settings, session_factory, admin_headers):
        app = create_app(settings)

        def override_get_db():
            session = session_factory()
            try:
                yield session
            finally:
                session.close()

        app.dependency_overrides[get_db] = override_get_db
        with TestClient(app) as client:
            resp = client.get("/api/admin/brand-stores", headers=admin_headers)
        assert resp.status_code == 200

    def test_sessions_use_app_database(self, settings, tmp_path):
        settings = settings.model_copy(update={"dev_database_url": f"sqlite:///{tmp_path / 'app.db'}"})
        engine = get_engine(settings.database_url)
        Base.metadata.create_all(bind=engine)
        try:
            with TestClient(create_app(settings)) as client:
                created = client.post(
                    "/api/auth/register",
                    json={"username": "carol", "email": "carol@example.com", "password": "secret123"},
                )
                assert created.status_code == 200
                token = create_token(settings, created.json()["data"]["user"]["id"], "carol@example.com", "user")
                me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
            assert me.status_code == 200
            assert me.json()["data"]["user"]["username"] == "carol"
        finally:
            engine.dispose()
