"""Tests for authentication API endpoints."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from artist_hub.utils.security import create_access_token, decode_access_token

REGISTRATION = {
    "username": "newuser",
    "email": "newuser@example.com",
    "password": "securepassword123",
}


class TestRegister:
    """Tests for user registration endpoint."""

    async def test_register_success(self, client: AsyncClient) -> None:
        """Test successful user registration."""
        response = await client.post(
            "/api/auth/register", json={**REGISTRATION, "display_name": " Nova "}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "newuser"
        assert data["email"] == "newuser@example.com"
        assert data["display_name"] == "Nova"
        assert data["is_active"] is True
        assert "id" in data
        assert "created_at" in data
        # Password should NOT be in response
        assert "password" not in data
        assert "hashed_password" not in data

    async def test_register_username_already_exists(self, client: AsyncClient, user) -> None:
        """Test registration with existing username."""
        response = await client.post(
            "/api/auth/register", json={**REGISTRATION, "username": user.username}
        )

        assert response.status_code == 409
        assert "Username already registered" in response.json()["detail"]

    async def test_register_email_already_exists(self, client: AsyncClient, user) -> None:
        """Test registration with existing email, compared case-insensitively."""
        response = await client.post(
            "/api/auth/register", json={**REGISTRATION, "email": user.email.upper()}
        )

        assert response.status_code == 409
        assert "Email already registered" in response.json()["detail"]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"email": "not-an-email"},
            {"password": "short"},
            {"username": "ab"},
            {"username": "bad user!"},
        ],
    )
    async def test_register_invalid(self, client: AsyncClient, overrides) -> None:
        """Test registration input validation."""
        response = await client.post("/api/auth/register", json={**REGISTRATION, **overrides})

        assert response.status_code == 422

    async def test_register_username_normalized_to_lowercase(self, client: AsyncClient) -> None:
        """Test that usernames are stored lowercased."""
        response = await client.post(
            "/api/auth/register", json={**REGISTRATION, "username": "New_User-1"}
        )

        assert response.status_code == 201
        assert response.json()["username"] == "new_user-1"


class TestLogin:
    """Tests for user login endpoint."""

    @pytest.mark.parametrize("login_name", ["ada", "ADA", "ada.lovelace@example.com"])
    async def test_login_success(self, client: AsyncClient, user, login_name) -> None:
        """Test login with username or email."""
        response = await client.post(
            "/api/auth/login",
            json={"username": login_name, "password": "securepassword123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert decode_access_token(data["access_token"])["sub"] == str(user.id)

    async def test_login_invalid_password(self, client: AsyncClient, user) -> None:
        """Test login with a wrong password."""
        response = await client.post(
            "/api/auth/login",
            json={"username": user.username, "password": "wrongpassword"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password"

    async def test_login_user_not_found(self, client: AsyncClient) -> None:
        """Test login with an unknown user."""
        response = await client.post(
            "/api/auth/login",
            json={"username": "nobody", "password": "securepassword123"},
        )

        assert response.status_code == 401

    async def test_login_inactive_user(self, client: AsyncClient, user) -> None:
        """Test that inactive accounts cannot log in."""
        user.is_active = False

        response = await client.post(
            "/api/auth/login",
            json={"username": user.username, "password": "securepassword123"},
        )

        assert response.status_code == 403


class TestMe:
    """Tests for the current account endpoint."""

    async def test_me(self, client: AsyncClient, user, auth_headers) -> None:
        """Test the current account is returned."""
        response = await client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["username"] == user.username

    async def test_me_requires_token(self, client: AsyncClient) -> None:
        """Test the endpoint requires authentication."""
        response = await client.get("/api/auth/me")

        assert response.status_code == 401

    async def test_me_expired_token(self, client: AsyncClient, user) -> None:
        """Test an expired token is rejected."""
        token = create_access_token(data={"sub": str(user.id)}, expires_delta=timedelta(minutes=-1))

        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401


class TestJWT:
    """Tests for JWT token generation and validation."""

    def test_decode_access_token_valid(self) -> None:
        """Test decoding a valid JWT token."""
        token = create_access_token(data={"sub": "42"})
        payload = decode_access_token(token)

        assert payload is not None
        assert payload["sub"] == "42"
        assert "exp" in payload

    def test_decode_access_token_invalid(self) -> None:
        """Test decoding an invalid JWT token."""
        assert decode_access_token("invalid.token.here") is None

    def test_decode_access_token_tampered(self) -> None:
        """Test decoding a tampered JWT token."""
        token = create_access_token(data={"sub": "1"})
        tampered_token = token[:-5] + "xxxxx"

        assert decode_access_token(tampered_token) is None
