import pytest
from httpx import AsyncClient
from fastapi import status

pytestmark = pytest.mark.asyncio

async def _provider(client: AsyncClient, headers: dict, name: str = "Quick Tow", type_: str = "EXTERNAL") -> dict:
    response = await client.post(
        "/api/service-providers", json={"name": name, "type": type_}, headers=headers
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()

class TestPartners:
    async def test_create_partner(self, client: AsyncClient, auth_headers: dict):
        """Test service-category links are stored and embedded as summaries."""
        tow = await _provider(client, auth_headers)
        garage = await _provider(client, auth_headers, name="Fix It Garage", type_="INTERNAL")

        response = await client.post(
            "/api/partners",
            json={
                "type": "BROKER",
                "name": "Acme Brokers",
                "email": "",
                "vehicleRecoveryId": tow["id"],
                "vehicleRepairsId": garage["id"],
                "vehicleStorageId": "   ",
            },
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["email"] is None
        assert data["vehicleRecoveryId"] == tow["id"]
        assert data["vehicleRecovery"] == {"id": tow["id"], "name": "Quick Tow", "type": "EXTERNAL"}
        assert data["vehicleRepairs"]["name"] == "Fix It Garage"
        assert data["vehicleStorageId"] is None
        assert data["vehicleStorage"] is None

    async def test_create_partner_unknown_provider(self, client: AsyncClient, auth_headers: dict):
        response = await client.post(
            "/api/partners",
            json={"type": "DIRECT", "name": "Acme", "replacementHireId": "no-such-provider"},
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["detail"] == "Validation failed"
        assert data["errors"] == [{"field": "replacementHireId", "message": "Service provider not found"}]

    async def test_create_partner_invalid_type(self, client: AsyncClient, auth_headers: dict):
        response = await client.post(
            "/api/partners", json={"type": "CHARITY", "name": "Acme"}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_update_partner_clears_blank_links(self, client: AsyncClient, auth_headers: dict):
        tow = await _provider(client, auth_headers)
        partner = (await client.post(
            "/api/partners",
            json={"type": "FLEET", "name": "Fleet Co", "vehicleRecoveryId": tow["id"]},
            headers=auth_headers
        )).json()

        response = await client.put(
            f"/api/partners/{partner['id']}",
            json={"vehicleRecoveryId": "", "phone": "0123"},
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["vehicleRecoveryId"] is None
        assert data["vehicleRecovery"] is None
        assert data["phone"] == "0123"
        assert data["name"] == "Fleet Co"

    async def test_update_partner_null_type(self, client: AsyncClient, auth_headers: dict):
        partner = (await client.post(
            "/api/partners", json={"type": "FLEET", "name": "Fleet Co"}, headers=auth_headers
        )).json()

        response = await client.put(
            f"/api/partners/{partner['id']}", json={"type": None}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert any(error["field"] == "type" for error in response.json()["errors"])

    async def test_deleting_provider_unlinks_partner(self, client: AsyncClient, auth_headers: dict):
        tow = await _provider(client, auth_headers)
        partner = (await client.post(
            "/api/partners",
            json={"type": "INSURER", "name": "Insure Co", "vehicleRecoveryId": tow["id"]},
            headers=auth_headers
        )).json()

        response = await client.delete(f"/api/service-providers/{tow['id']}", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK

        data = (await client.get(f"/api/partners/{partner['id']}", headers=auth_headers)).json()
        assert data["vehicleRecoveryId"] is None

    async def test_list_and_delete_partner(self, client: AsyncClient, auth_headers: dict):
        partner = (await client.post(
            "/api/partners", json={"type": "DEALERSHIP", "name": "Cars R Us"}, headers=auth_headers
        )).json()

        listing = (await client.get("/api/partners", headers=auth_headers)).json()
        assert [p["id"] for p in listing] == [partner["id"]]

        response = await client.delete(f"/api/partners/{partner['id']}", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK

        response = await client.get(f"/api/partners/{partner['id']}", headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_deleting_partner_keeps_users(
        self,
        client: AsyncClient,
        admin_headers: dict
    ):
        partner = (await client.post(
            "/api/partners", json={"type": "BODYSHOP", "name": "Body Shop"}, headers=admin_headers
        )).json()
        user = (await client.post(
            "/api/users",
            json={"name": "Partner User", "email": "partner@example.com", "role": "PARTNER",
                  "partnerId": partner["id"]},
            headers=admin_headers
        )).json()
        assert user["partner"]["name"] == "Body Shop"

        await client.delete(f"/api/partners/{partner['id']}", headers=admin_headers)

        response = await client.get(f"/api/users/{user['id']}", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["partnerId"] is None
