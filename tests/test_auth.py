"""Tests for authentication endpoints and token verification."""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import jwt
from sqlalchemy import select

from app.core.config import settings
from app.models.user import User, UserRole
from app.services.auth import (
    ALGORITHM,
    create_access_token,
    hash_password,
    verify_password,
    verify_token,
)


def test_password_hashing():
    """Password hashing should be one-way and verifiable."""
    password = "supersecret123"
    hashed = hash_password(password)

    # Hashed password should be different from plain text
    assert hashed != password

    # Should verify correctly
    assert verify_password(password, hashed) is True

    # Wrong password should fail
    assert verify_password("wrongpassword", hashed) is False


def test_verify_token_extracts_identity():
    user_id = uuid4()
    token = create_access_token({"sub": str(user_id), "email": "x@example.com", "role": "MARKETING"})

    identity = verify_token(token)

    assert identity is not None
    assert identity.user_id == user_id
    assert identity.role == UserRole.MARKETING
    assert identity.email == "x@example.com"


def test_verify_token_rejects_expired_token():
    token = create_access_token(
        {"sub": str(uuid4()), "role": "SALES"}, expires_delta=timedelta(seconds=-10)
    )
    assert verify_token(token) is None


def test_verify_token_rejects_bad_signature():
    token = jwt.encode({"sub": str(uuid4()), "role": "ADMIN"}, "not-the-secret", algorithm=ALGORITHM)
    assert verify_token(token) is None


def test_verify_token_rejects_unknown_role_and_garbage():
    token = create_access_token({"sub": str(uuid4()), "role": "SUPERUSER"})
    assert verify_token(token) is None
    assert verify_token("not-a-jwt") is None
    assert verify_token("") is None
    assert verify_token(None) is None


@pytest.mark.asyncio
async def test_register_returns_token_and_user(client, db):
    """Registration creates the user and logs them in."""
    resp = await client.post("/api/v1/auth/register", json={
        "name": "New Rep",
        "email": "rep@example.com",
        "password": "testpass123",
    })

    assert resp.status_code == 201
    data = resp.json()
    assert data["token"]
    assert data["user"]["email"] == "rep@example.com"
    assert data["user"]["role"] == "SALES"
    assert "hashedPassword" not in data["user"]

    identity = verify_token(data["token"])
    assert str(identity.user_id) == data["user"]["id"]

    result = await db.execute(select(User).where(User.email == "rep@example.com"))
    user = result.scalar_one()
    assert user.name == "New Rep"
    assert user.hashed_password != "testpass123"


@pytest.mark.asyncio
async def test_register_duplicate_email_fails(client):
    """Registering the same email twice should fail with 400."""
    user_data = {"name": "Dup", "email": "duplicate@example.com", "password": "testpass123"}

    resp1 = await client.post("/api/v1/auth/register", json=user_data)
    assert resp1.status_code == 201

    resp2 = await client.post("/api/v1/auth/register", json=user_data)
    assert resp2.status_code == 400
    assert "already exists" in resp2.json()["detail"].lower()


@pytest.mark.asyncio
async def test_register_rejects_short_password_and_bad_role(client):
    resp = await client.post("/api/v1/auth/register", json={
        "name": "Short", "email": "short@example.com", "password": "123",
    })
    assert resp.status_code == 400

    resp = await client.post("/api/v1/auth/register", json={
        "name": "Role", "email": "role@example.com", "password": "testpass123", "role": "OWNER",
    })
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_login_with_valid_credentials(client, sales_user):
    resp = await client.post("/api/v1/auth/login", json={
        "email": sales_user["email"],
        "password": "testpass123",
    })

    assert resp.status_code == 200
    data = resp.json()
    assert data["user"]["id"] == sales_user["user_id"]
    assert data["user"]["role"] == "SALES"
    assert verify_token(data["token"]).role == UserRole.SALES


@pytest.mark.asyncio
async def test_login_with_invalid_credentials(client, sales_user):
    """Login should fail with wrong password or unknown email."""
    resp = await client.post("/api/v1/auth/login", json={
        "email": sales_user["email"],
        "password": "wrongpass",
    })
    assert resp.status_code == 401

    resp = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com",
        "password": "testpass123",
    })
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_protected_endpoint_requires_auth(client):
    """Protected endpoints should reject requests without a token."""
    resp = await client.get("/api/v1/auth/me")
    assert resp.status_code == 401

    resp = await client.get("/api/v1/leads", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_expired_token_is_rejected(client, sales_user):
    token = create_access_token(
        {"sub": sales_user["user_id"], "role": "SALES"}, expires_delta=timedelta(seconds=-10)
    )
    resp = await client.get("/api/v1/leads", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_protected_endpoint_with_valid_token(client, sales_user):
    resp = await client.get("/api/v1/auth/me", headers=sales_user["headers"])

    assert resp.status_code == 200
    data = resp.json()
    assert data["email"] == sales_user["email"]
    assert data["name"] == "Sales User"


def test_tokens_are_signed_with_configured_secret():
    token = create_access_token({"sub": str(uuid4()), "role": "ADMIN"})
    payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[ALGORITHM])
    assert payload["role"] == "ADMIN"
    assert "exp" in payload
