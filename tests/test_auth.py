"""
Smoke tests for signup, login and admin login.
"""
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.core.exceptions import ConfigurationError
from app.core.security import decode_access_token, hash_password, verify_password
from app.main import app


def test_signup_and_login(client, db):
    response = client.post(
        "/auth/signup",
        json={"email": "New@Example.com", "password": "SecurePass123", "preferred_language": "en"},
    )
    assert response.status_code == 201
    user_id = response.json()["user_id"]

    response = client.post(
        "/auth/login",
        data={"username": "new@example.com", "password": "SecurePass123"},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert decode_access_token(data["access_token"])["sub"] == user_id


def test_signup_duplicate_email(client, test_user):
    response = client.post(
        "/auth/signup",
        json={"email": test_user.email, "password": "SecurePass123"},
    )
    assert response.status_code == 400


def test_signup_short_password(client, db):
    response = client.post("/auth/signup", json={"email": "a@example.com", "password": "short"})
    assert response.status_code == 422


def test_login_wrong_password(client, test_user):
    response = client.post(
        "/auth/login",
        data={"username": test_user.email, "password": "wrongpass"},
    )
    assert response.status_code == 401


def test_admin_login(client, monkeypatch):
    monkeypatch.setattr("app.api.routes.auth.ADMIN_EMAIL", "admin@example.com")
    monkeypatch.setattr("app.api.routes.auth.ADMIN_PASSWORD", "admin-secret")

    response = client.post("/auth/admin/login", json={"email": "admin@example.com", "password": "admin-secret"})
    assert response.status_code == 200
    assert decode_access_token(response.json()["access_token"])["role"] == "admin"

    response = client.post("/auth/admin/login", json={"email": "admin@example.com", "password": "nope"})
    assert response.status_code == 401


def test_admin_login_non_ascii_password(client, monkeypatch):
    monkeypatch.setattr("app.api.routes.auth.ADMIN_EMAIL", "admin@example.com")
    monkeypatch.setattr("app.api.routes.auth.ADMIN_PASSWORD", "güçlüŞifre42")

    response = client.post("/auth/admin/login", json={"email": "admin@example.com", "password": "şifre123"})
    assert response.status_code == 401

    response = client.post("/auth/admin/login", json={"email": "admin@example.com", "password": "güçlüŞifre42"})
    assert response.status_code == 200


def test_startup_requires_secret_key(monkeypatch):
    monkeypatch.setattr("app.core.config.SECRET_KEY", None)

    with pytest.raises(ConfigurationError):
        with TestClient(app):
            pass


def test_token_signed_with_other_key_is_rejected(client, plans, test_user):
    forged = jwt.encode({"sub": "admin@example.com", "role": "admin"}, "change-me", algorithm="HS256")

    response = client.post(
        f"/admin/users/{test_user.id}/plan",
        json={"plan": "pro"},
        headers={"Authorization": f"Bearer {forged}"},
    )

    assert response.status_code == 401


def test_admin_login_unconfigured(client, monkeypatch):
    monkeypatch.setattr("app.api.routes.auth.ADMIN_EMAIL", None)
    monkeypatch.setattr("app.api.routes.auth.ADMIN_PASSWORD", None)

    response = client.post("/auth/admin/login", json={"email": "admin@example.com", "password": "x"})
    assert response.status_code == 401


def test_admin_token_cannot_act_as_user(client, plans, admin_headers):
    response = client.post("/me/usage/check", headers=admin_headers)
    assert response.status_code == 401


def test_password_hashing_roundtrip():
    hashed = hash_password("testpass123")

    assert verify_password("testpass123", hashed) is True
    assert verify_password("wrongpass", hashed) is False
    assert verify_password("testpass123", "not-a-hash") is False
