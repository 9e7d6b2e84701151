import pytest
from httpx import AsyncClient
from fastapi import status

pytestmark = pytest.mark.asyncio

class TestServiceProviders:
    async def test_create_service_provider(self, client: AsyncClient, auth_headers: dict):
        response = await client.post(
            "/api/service-providers",
            json={"type": "INTERNAL", "name": "In House Storage", "email": "store@example.com", "phone": ""},
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["name"] == "In House Storage"
        assert data["email"] == "store@example.com"
        assert data["phone"] is None

    async def test_create_service_provider_invalid_email(self, client: AsyncClient, auth_headers: dict):
        response = await client.post(
            "/api/service-providers",
            json={"type": "INTERNAL", "name": "Storage", "email": "not-an-email"},
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "email"

    async def test_search_service_providers(self, client: AsyncClient, auth_headers: dict):
        """Test search matches name fragments case-insensitively, ordered by name."""
        for name in ("Zeta Recovery", "alpha recovery", "Beta Repairs", "Recovery 100%"):
            await client.post(
                "/api/service-providers", json={"type": "EXTERNAL", "name": name}, headers=auth_headers
            )

        response = await client.get(
            "/api/service-providers/search", params={"q": "RECOVERY"}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_200_OK
        names = [provider["name"] for provider in response.json()]
        assert sorted(names, key=str.lower) == sorted(
            ["Zeta Recovery", "alpha recovery", "Recovery 100%"], key=str.lower
        )

        response = await client.get("/api/service-providers/search", params={"q": "%"}, headers=auth_headers)
        assert [provider["name"] for provider in response.json()] == ["Recovery 100%"]

    async def test_search_limit(self, client: AsyncClient, auth_headers: dict):
        for i in range(12):
            await client.post(
                "/api/service-providers", json={"type": "EXTERNAL", "name": f"Garage {i:02d}"}, headers=auth_headers
            )
        response = await client.get("/api/service-providers/search", params={"q": "garage"}, headers=auth_headers)
        names = [provider["name"] for provider in response.json()]
        assert names == [f"Garage {i:02d}" for i in range(10)]

    async def test_update_service_provider(self, client: AsyncClient, auth_headers: dict):
        provider = (await client.post(
            "/api/service-providers", json={"type": "EXTERNAL", "name": "Old Name"}, headers=auth_headers
        )).json()

        response = await client.put(
            f"/api/service-providers/{provider['id']}",
            json={"name": "New Name", "type": "INTERNAL"},
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "New Name"
        assert response.json()["type"] == "INTERNAL"

    async def test_update_service_provider_null_name(self, client: AsyncClient, auth_headers: dict):
        provider = (await client.post(
            "/api/service-providers", json={"type": "EXTERNAL", "name": "Keep Me"}, headers=auth_headers
        )).json()

        response = await client.put(
            f"/api/service-providers/{provider['id']}", json={"name": None}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert any(error["field"] == "name" for error in response.json()["errors"])

    async def test_missing_service_provider(self, client: AsyncClient, auth_headers: dict):
        response = await client.get("/api/service-providers/missing", headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

        response = await client.delete("/api/service-providers/missing", headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND
