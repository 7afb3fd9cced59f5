"""
Authentication and authorization tests.

Verifies:
- Login issues a bearer token that /session accepts
- Protected endpoints return 401 without a token
- Login attempts are throttled per client
- User management is admin only
"""

from datetime import timedelta

import pytest
from jose import jwt

from pos_api.core.config import settings
from pos_api.core.jwt import create_access_token, decode_access_token, issue_token


class TestLogin:
    def test_login_and_session(self, client, cashier):
        resp = client.post("/api/auth/login", json={"username": "cashier1", "password": "Password123!"})

        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["tokenType"] == "bearer"
        assert data["user"]["username"] == "cashier1"
        assert "passwordHash" not in data["user"]

        session = client.get(
            "/api/auth/session",
            headers={"Authorization": f"Bearer {data['accessToken']}"},
        )
        assert session.status_code == 200
        assert session.json()["id"] == cashier.id

    def test_wrong_password(self, client, cashier):
        resp = client.post("/api/auth/login", json={"username": "cashier1", "password": "nope"})

        assert resp.status_code == 401
        assert resp.json() == {"message": "Invalid username or password"}

    def test_unknown_user(self, client):
        resp = client.post("/api/auth/login", json={"username": "ghost", "password": "Password123!"})
        assert resp.status_code == 401

    def test_login_is_rate_limited(self, client, cashier):
        for _ in range(5):
            client.post("/api/auth/login", json={"username": "cashier1", "password": "wrong"})

        resp = client.post("/api/auth/login", json={"username": "cashier1", "password": "Password123!"})

        assert resp.status_code == 429

    def test_logout(self, client):
        assert client.post("/api/auth/logout").json() == {"message": "Logged out successfully"}


class TestTokens:
    def test_session_without_token(self, client):
        resp = client.get("/api/auth/session")
        assert resp.status_code == 401
        assert resp.json() == {"message": "Not authenticated"}

    def test_garbage_token(self, client):
        resp = client.get("/api/auth/session", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_token_for_deleted_user(self, client):
        token = create_access_token({"sub": "no-such-user", "role": "admin"})
        resp = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401

    def test_user_token_claims(self, cashier):
        claims = decode_access_token(issue_token(cashier))

        assert claims["sub"] == cashier.id
        assert claims["role"] == "cashier"
        assert claims["type"] == "access"
        assert claims["exp"] - claims["iat"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    def test_expired_token(self, client, cashier):
        token = issue_token(cashier, expires_delta=timedelta(seconds=-1))

        resp = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})

        assert resp.status_code == 401
        assert resp.json() == {"message": "Invalid or expired token"}

    def test_token_of_other_type_rejected(self, cashier):
        token = jwt.encode(
            {"sub": cashier.id, "type": "refresh"},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )
        assert decode_access_token(token) is None

    def test_token_without_subject_rejected(self, client):
        token = create_access_token({"role": "admin"})

        resp = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"})

        assert resp.status_code == 401

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/products"),
            ("GET", "/api/customers"),
            ("GET", "/api/transactions"),
            ("POST", "/api/transactions"),
            ("GET", "/api/returns"),
            ("POST", "/api/shifts"),
            ("GET", "/api/analytics/top-products"),
            ("GET", "/api/users"),
        ],
    )
    def test_requires_auth(self, client, method, path):
        resp = client.request(method, path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"


class TestUserManagement:
    def test_cashier_cannot_list_users(self, client, cashier_headers):
        resp = client.get("/api/users", headers=cashier_headers)
        assert resp.status_code == 403

    def test_admin_creates_user(self, client, admin_headers):
        resp = client.post(
            "/api/users",
            json={"username": "manager1", "password": "Password123!", "role": "manager"},
            headers=admin_headers,
        )

        assert resp.status_code == 201, resp.text
        assert resp.json()["role"] == "manager"

        login = client.post("/api/auth/login", json={"username": "manager1", "password": "Password123!"})
        assert login.status_code == 200

    def test_duplicate_username(self, client, admin_headers, cashier):
        resp = client.post(
            "/api/users",
            json={"username": "cashier1", "password": "Password123!"},
            headers=admin_headers,
        )
        assert resp.status_code == 409

    def test_short_password_rejected(self, client, admin_headers):
        resp = client.post(
            "/api/users",
            json={"username": "short", "password": "abc"},
            headers=admin_headers,
        )
        assert resp.status_code == 400

    def test_update_role(self, client, admin_headers, cashier):
        resp = client.put(f"/api/users/{cashier.id}", json={"role": "manager"}, headers=admin_headers)
        assert resp.json()["role"] == "manager"

    def test_admin_cannot_delete_self(self, client, admin, admin_headers):
        resp = client.delete(f"/api/users/{admin.id}", headers=admin_headers)
        assert resp.status_code == 400

    def test_user_with_shift_cannot_be_deleted(self, client, admin_headers, cashier, open_shift):
        resp = client.delete(f"/api/users/{cashier.id}", headers=admin_headers)
        assert resp.status_code == 409

    def test_delete_user(self, client, admin_headers, cashier):
        resp = client.delete(f"/api/users/{cashier.id}", headers=admin_headers)

        assert resp.status_code == 200
        assert client.get(f"/api/users/{cashier.id}", headers=admin_headers).status_code == 404
