"""
Tests for the auth endpoints and bearer token checks.
"""
from datetime import timedelta

from backend.auth import create_access_token
from backend.tests.conftest import register


class TestRegister:
    """Tests for POST /api/auth/register"""

    def test_new_user_starts_at_level_one(self, api):
        body = register(api)

        assert body["token"]
        assert body["user"]["points"] == 0
        assert body["user"]["level"] == 1
        assert body["user"]["badges"] == []
        assert body["user"]["hasSeenOnboarding"] is False
        assert "password" not in body["user"]
        assert "passwordHash" not in body["user"]

    def test_email_is_lowercased(self, api):
        body = register(api, email="Alice@Example.COM")

        assert body["user"]["email"] == "alice@example.com"

    def test_missing_field_rejected(self, api):
        response = api.post("/api/auth/register", json={"username": "alice", "email": "a@b.c"})

        assert response.status_code == 400

    def test_short_password_rejected(self, api):
        response = api.post("/api/auth/register", json={
            "username": "alice", "email": "a@b.c", "password": "12345"
        })

        assert response.status_code == 400
        assert "6" in response.json()["detail"]

    def test_duplicate_email_rejected(self, api):
        register(api)
        response = api.post("/api/auth/register", json={
            "username": "alice2", "email": "ALICE@example.com", "password": "secret123"
        })

        assert response.status_code == 400


class TestLogin:
    """Tests for POST /api/auth/login"""

    def test_login_returns_token(self, api):
        register(api)
        response = api.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})

        assert response.status_code == 200
        assert response.json()["user"]["username"] == "alice"

    def test_unknown_email_is_404(self, api):
        response = api.post("/api/auth/login", json={"email": "nobody@example.com", "password": "secret123"})

        assert response.status_code == 404

    def test_wrong_password_is_400(self, api):
        register(api)
        response = api.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid email or password"


class TestBearerToken:
    """Protected routes reject missing, bad and expired tokens"""

    def test_missing_token_is_401(self, api):
        assert api.get("/api/data").status_code == 401

    def test_garbage_token_is_401(self, api):
        response = api.get("/api/data", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_expired_token_is_401(self, api, auth):
        token = create_access_token(auth["user"]["id"], expires_delta=timedelta(seconds=-1))
        response = api.get("/api/data", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_token_for_missing_user_is_401(self, api):
        token = create_access_token(9999)
        response = api.get("/api/data", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_valid_token_loads_data(self, api, auth):
        response = api.get("/api/data", headers=auth["headers"])

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["id"] == auth["user"]["id"]
        assert body["habits"] == []
        assert body["tasks"] == []

    def test_security_headers_present(self, api):
        response = api.get("/")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
