import pytest
from httpx import AsyncClient
from fastapi import status

pytestmark = pytest.mark.asyncio

NEW_USER = {
    "name": "New Handler",
    "email": "handler@example.com",
    "password": "secret-password",
    "role": "USER",
}

class TestUsers:
    async def test_create_user_as_admin(self, client: AsyncClient, admin_headers: dict):
        response = await client.post("/api/users", json=NEW_USER, headers=admin_headers)
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["email"] == NEW_USER["email"]
        assert data["role"] == "USER"
        assert "password" not in data

    async def test_created_user_can_login(self, client: AsyncClient, admin_headers: dict):
        await client.post("/api/users", json=NEW_USER, headers=admin_headers)
        response = await client.post(
            "/api/auth/login",
            data={"username": NEW_USER["email"], "password": NEW_USER["password"]}
        )
        assert response.status_code == status.HTTP_200_OK

    async def test_create_user_requires_admin(self, client: AsyncClient, auth_headers: dict):
        """Test user management writes are limited to admins."""
        response = await client.post("/api/users", json=NEW_USER, headers=auth_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_create_duplicate_email(self, client: AsyncClient, admin_headers: dict, test_admin):
        response = await client.post(
            "/api/users", json={**NEW_USER, "email": test_admin.email}, headers=admin_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "User with this email already exists"

    async def test_create_user_invalid_email(self, client: AsyncClient, admin_headers: dict):
        response = await client.post(
            "/api/users", json={**NEW_USER, "email": "nope"}, headers=admin_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_list_users(self, client: AsyncClient, auth_headers: dict, test_admin):
        response = await client.get("/api/users", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        emails = {user["email"] for user in response.json()}
        assert emails == {"user@example.com", "admin@example.com"}

    async def test_search_users(self, client: AsyncClient, admin_headers: dict):
        """Test email search is case-insensitive, capped at five and ordered by email."""
        for i in range(7):
            await client.post(
                "/api/users",
                json={**NEW_USER, "email": f"handler{i}@claims.example.com"},
                headers=admin_headers
            )

        response = await client.get("/api/users/search", params={"q": "CLAIMS.EXAMPLE"}, headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        emails = [user["email"] for user in response.json()]
        assert emails == [f"handler{i}@claims.example.com" for i in range(5)]
        assert set(response.json()[0]) == {"id", "name", "email"}

    async def test_search_users_blank_query(self, client: AsyncClient, auth_headers: dict):
        for q in ("", "   "):
            response = await client.get("/api/users/search", params={"q": q}, headers=auth_headers)
            assert response.status_code == status.HTTP_200_OK
            assert response.json() == []

    async def test_update_user_keeps_password_when_blank(
        self,
        client: AsyncClient,
        admin_headers: dict,
        test_user,
        test_password: str
    ):
        response = await client.put(
            f"/api/users/{test_user.id}",
            json={"name": "Renamed", "password": ""},
            headers=admin_headers
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Renamed"

        response = await client.post(
            "/api/auth/login", data={"username": test_user.email, "password": test_password}
        )
        assert response.status_code == status.HTTP_200_OK

    async def test_update_user_password(self, client: AsyncClient, admin_headers: dict, test_user):
        await client.put(
            f"/api/users/{test_user.id}", json={"password": "brand-new-pass"}, headers=admin_headers
        )
        response = await client.post(
            "/api/auth/login", data={"username": test_user.email, "password": "brand-new-pass"}
        )
        assert response.status_code == status.HTTP_200_OK

    async def test_update_user_duplicate_email(
        self,
        client: AsyncClient,
        admin_headers: dict,
        test_user,
        test_admin
    ):
        response = await client.put(
            f"/api/users/{test_user.id}", json={"email": test_admin.email}, headers=admin_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_update_user_null_email(self, client: AsyncClient, admin_headers: dict, test_user):
        response = await client.put(
            f"/api/users/{test_user.id}", json={"email": None}, headers=admin_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert any(error["field"] == "email" for error in response.json()["errors"])

    async def test_update_user_requires_admin(self, client: AsyncClient, auth_headers: dict, test_user):
        response = await client.put(
            f"/api/users/{test_user.id}", json={"role": "ADMIN"}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_delete_user(self, client: AsyncClient, admin_headers: dict):
        user = (await client.post("/api/users", json=NEW_USER, headers=admin_headers)).json()

        response = await client.delete(f"/api/users/{user['id']}", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK

        response = await client.get(f"/api/users/{user['id']}", headers=admin_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_delete_user_with_cases(
        self,
        client: AsyncClient,
        admin_headers: dict,
        auth_headers: dict,
        test_user
    ):
        """Test users who created cases are kept."""
        await client.post(
            "/api/cases", json={"title": "Case", "client": "Client", "priority": "LOW"}, headers=auth_headers
        )
        response = await client.delete(f"/api/users/{test_user.id}", headers=admin_headers)
        assert response.status_code == status.HTTP_409_CONFLICT

    async def test_delete_missing_user(self, client: AsyncClient, admin_headers: dict):
        response = await client.delete("/api/users/missing", headers=admin_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND
