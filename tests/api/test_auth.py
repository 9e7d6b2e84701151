import pytest
from httpx import AsyncClient
from fastapi import status

from app.core.config import settings
from app.core.security import create_access_token

pytestmark = pytest.mark.asyncio

class TestAuthentication:
    async def test_login_user(
        self,
        client: AsyncClient,
        test_user,
        test_password: str
    ):
        """Test user login returns a token and sets the session cookie."""
        response = await client.post(
            "/api/auth/login",
            data={
                "username": test_user.email,
                "password": test_password
            }
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["accessToken"]
        assert data["tokenType"] == "bearer"
        assert settings.SESSION_COOKIE_NAME in response.headers.get("set-cookie", "")

    async def test_login_wrong_password(
        self,
        client: AsyncClient,
        test_user
    ):
        """Test login with wrong password."""
        response = await client.post(
            "/api/auth/login",
            data={
                "username": test_user.email,
                "password": "wrong_password"
            }
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_login_unknown_email(self, client: AsyncClient, test_password: str):
        response = await client.post(
            "/api/auth/login",
            data={"username": "nobody@example.com", "password": test_password}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_me_with_bearer_token(
        self,
        client: AsyncClient,
        test_user,
        auth_headers: dict
    ):
        """Test the current user is resolved from the bearer token."""
        response = await client.get("/api/auth/me", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["email"] == test_user.email
        assert data["role"] == "USER"
        assert "password" not in data

    async def test_me_with_session_cookie(
        self,
        client: AsyncClient,
        test_user
    ):
        """Test the current user is resolved from the session cookie."""
        client.cookies.set(settings.SESSION_COOKIE_NAME, create_access_token(test_user.id))
        response = await client.get("/api/auth/me")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == test_user.id

    async def test_missing_session(self, client: AsyncClient):
        """Test protected routes answer 401 without a session."""
        for url in ("/api/auth/me", "/api/cases", "/api/claims", "/api/partners"):
            response = await client.get(url)
            assert response.status_code == status.HTTP_401_UNAUTHORIZED
            assert response.json() == {"detail": "Unauthorized"}

    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get(
            "/api/auth/me",
            headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_token_for_deleted_user(self, client: AsyncClient):
        """Test a valid token naming no user is rejected."""
        headers = {"Authorization": f"Bearer {create_access_token('missing-user-id')}"}
        response = await client.get("/api/auth/me", headers=headers)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_expired_token(self, client: AsyncClient, test_user):
        token = create_access_token(test_user.id, expires_in=-10)
        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_logout_clears_cookie(self, client: AsyncClient):
        response = await client.post("/api/auth/logout")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["success"] is True
        assert settings.SESSION_COOKIE_NAME in response.headers.get("set-cookie", "")

    async def test_health_is_public(self, client: AsyncClient):
        response = await client.get("/api/health")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["database"] == "connected"
