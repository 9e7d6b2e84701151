import pytest
from httpx import AsyncClient
from fastapi import status

pytestmark = pytest.mark.asyncio

STEP_DATA = {
    "creditCardInterest": "yes",
    "financialAssessment": "Struggling with repayments",
    "bankAccounts": [
        {"bankName": "Bank A", "accountNumber": "12345678", "balance": "250.50"},
    ],
    "creditCards": [
        {"issuer": "Card Co", "last4": "4242", "balance": 900, "limit": "1500"},
        {"issuer": "Other Card", "last4": "", "balance": ""},
    ],
    "loans": [{"lender": "Loan Ltd", "balance": "3000"}],
    "mortgages": [],
    "hirePurchaseAgreements": [{"lender": "Cars Finance", "monthlyPayment": "199.99"}],
}

async def _save(client: AsyncClient, claim_id: str, payload: dict, headers: dict) -> dict:
    response = await client.post(f"/api/claims/{claim_id}/financial-step", json=payload, headers=headers)
    assert response.status_code == status.HTTP_200_OK
    return response.json()

async def _upload_card_statement(client: AsyncClient, claim_id: str, card_id: str, headers: dict):
    return await client.post(
        f"/api/claims/{claim_id}/financial-step/card-statements",
        data={"creditCardId": card_id, "startDate": "2024-01-01", "endDate": "2024-01-31"},
        files={"file": ("january.pdf", b"%PDF-1.4", "application/pdf")},
        headers=headers
    )

class TestFinancialStep:
    async def test_no_step_yet(self, client: AsyncClient, auth_headers: dict, test_claim: dict):
        response = await client.get(f"/api/claims/{test_claim['id']}/financial-step", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json() is None

    async def test_step_for_missing_claim(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/api/claims/missing/financial-step", json={}, headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_save_step(self, client: AsyncClient, auth_headers: dict, test_claim: dict):
        """Test saving creates exactly the rows sent, in order, with values parsed."""
        data = await _save(client, test_claim["id"], STEP_DATA, auth_headers)
        assert data["claimId"] == test_claim["id"]
        assert data["creditCardInterest"] == "yes"
        assert data["bankAccounts"][0]["balance"] == 250.5
        assert [card["issuer"] for card in data["creditCards"]] == ["Card Co", "Other Card"]
        assert data["creditCards"][0]["limit"] == 1500
        assert data["creditCards"][1]["last4"] is None
        assert data["creditCards"][1]["balance"] is None
        assert data["loans"][0]["balance"] == 3000
        assert data["mortgages"] == []
        assert data["hirePurchaseAgreements"][0]["monthlyPayment"] == 199.99

    async def test_save_replaces_collections(self, client: AsyncClient, auth_headers: dict, test_claim: dict):
        claim_id = test_claim["id"]
        await _save(client, claim_id, STEP_DATA, auth_headers)

        data = await _save(client, claim_id, {"creditCards": [{"issuer": "Only Card"}], "loans": []}, auth_headers)
        assert [card["issuer"] for card in data["creditCards"]] == ["Only Card"]
        assert data["loans"] == []
        # Collections not sent are untouched
        assert len(data["bankAccounts"]) == 1
        assert len(data["hirePurchaseAgreements"]) == 1
        assert data["creditCardInterest"] == "yes"

    async def test_save_null_clears_collection(self, client: AsyncClient, auth_headers: dict, test_claim: dict):
        claim_id = test_claim["id"]
        await _save(client, claim_id, STEP_DATA, auth_headers)
        data = await _save(client, claim_id, {"bankAccounts": None}, auth_headers)
        assert data["bankAccounts"] == []

    async def test_save_keeps_rows_by_id(self, client: AsyncClient, auth_headers: dict, test_claim: dict):
        """Test rows sent back with their id are updated in place and keep statements."""
        claim_id = test_claim["id"]
        data = await _save(client, claim_id, STEP_DATA, auth_headers)
        card = data["creditCards"][0]
        response = await _upload_card_statement(client, claim_id, card["id"], auth_headers)
        assert response.status_code == status.HTTP_200_OK

        payload = {"creditCards": [
            {"issuer": "New Card"},
            {"id": card["id"], "issuer": "Card Co Renamed", "last4": "4242"},
        ]}
        data = await _save(client, claim_id, payload, auth_headers)
        assert [c["issuer"] for c in data["creditCards"]] == ["New Card", "Card Co Renamed"]
        kept = data["creditCards"][1]
        assert kept["id"] == card["id"]
        assert len(kept["cardStatements"]) == 1
        assert data["creditCards"][0]["cardStatements"] == []

    async def test_delete_step(self, client: AsyncClient, auth_headers: dict, test_claim: dict):
        claim_id = test_claim["id"]
        await _save(client, claim_id, STEP_DATA, auth_headers)

        response = await client.delete(f"/api/claims/{claim_id}/financial-step", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["success"] is True

        response = await client.get(f"/api/claims/{claim_id}/financial-step", headers=auth_headers)
        assert response.json() is None

        response = await client.delete(f"/api/claims/{claim_id}/financial-step", headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

class TestStatements:
    async def test_upload_card_statement(
        self,
        client: AsyncClient,
        auth_headers: dict,
        test_claim: dict,
        storage
    ):
        claim_id = test_claim["id"]
        card_id = (await _save(client, claim_id, STEP_DATA, auth_headers))["creditCards"][0]["id"]

        response = await _upload_card_statement(client, claim_id, card_id, auth_headers)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["fileKey"].startswith(f"claims/financial/{claim_id}/{card_id}/")
        assert data["statement"]["startDate"] == "2024-01-01"
        assert data["statement"]["fileName"] == "january.pdf"
        assert data["fileKey"] in storage.objects

    async def test_upload_bank_statement(self, client: AsyncClient, auth_headers: dict, test_claim: dict):
        claim_id = test_claim["id"]
        account_id = (await _save(client, claim_id, STEP_DATA, auth_headers))["bankAccounts"][0]["id"]

        response = await client.post(
            f"/api/claims/{claim_id}/financial-step/bank-statements",
            data={"bankAccountId": account_id, "startDate": "2024-02-01", "endDate": "2024-02-29"},
            files={"file": ("feb.png", b"png-bytes", "image/png")},
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_200_OK

        step = (await client.get(f"/api/claims/{claim_id}/financial-step", headers=auth_headers)).json()
        assert step["bankAccounts"][0]["bankStatements"][0]["fileName"] == "feb.png"

    async def test_upload_statement_wrong_type(self, client: AsyncClient, auth_headers: dict, test_claim: dict):
        claim_id = test_claim["id"]
        card_id = (await _save(client, claim_id, STEP_DATA, auth_headers))["creditCards"][0]["id"]
        response = await client.post(
            f"/api/claims/{claim_id}/financial-step/card-statements",
            data={"creditCardId": card_id, "startDate": "2024-01-01", "endDate": "2024-01-31"},
            files={"file": ("sheet.csv", b"a,b", "text/csv")},
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_upload_statement_unknown_card(self, client: AsyncClient, auth_headers: dict, test_claim: dict):
        response = await _upload_card_statement(client, test_claim["id"], "no-such-card", auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_upload_statement_other_claims_card(
        self,
        client: AsyncClient,
        auth_headers: dict,
        test_claim: dict,
        claim_data: dict
    ):
        """Test a card of another claim cannot receive statements through this claim."""
        other = (await client.post("/api/claims", json=claim_data, headers=auth_headers)).json()
        card_id = (await _save(client, other["id"], STEP_DATA, auth_headers))["creditCards"][0]["id"]

        response = await _upload_card_statement(client, test_claim["id"], card_id, auth_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_delete_card_statement(
        self,
        client: AsyncClient,
        auth_headers: dict,
        test_claim: dict,
        storage
    ):
        claim_id = test_claim["id"]
        card_id = (await _save(client, claim_id, STEP_DATA, auth_headers))["creditCards"][0]["id"]
        uploaded = (await _upload_card_statement(client, claim_id, card_id, auth_headers)).json()

        response = await client.delete(
            f"/api/claims/{claim_id}/financial-step/card-statements",
            params={"statementId": uploaded["statement"]["id"]},
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_200_OK
        assert uploaded["fileKey"] in storage.deleted

        step = (await client.get(f"/api/claims/{claim_id}/financial-step", headers=auth_headers)).json()
        assert step["creditCards"][0]["cardStatements"] == []

    async def test_delete_statement_requires_id(self, client: AsyncClient, auth_headers: dict, test_claim: dict):
        response = await client.delete(
            f"/api/claims/{test_claim['id']}/financial-step/card-statements", headers=auth_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_delete_statement_of_other_claim(
        self,
        client: AsyncClient,
        auth_headers: dict,
        test_claim: dict,
        claim_data: dict
    ):
        other = (await client.post("/api/claims", json=claim_data, headers=auth_headers)).json()
        card_id = (await _save(client, other["id"], STEP_DATA, auth_headers))["creditCards"][0]["id"]
        uploaded = (await _upload_card_statement(client, other["id"], card_id, auth_headers)).json()

        response = await client.delete(
            f"/api/claims/{test_claim['id']}/financial-step/card-statements",
            params={"statementId": uploaded["statement"]["id"]},
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_download_statement(self, client: AsyncClient, auth_headers: dict, test_claim: dict):
        claim_id = test_claim["id"]
        card_id = (await _save(client, claim_id, STEP_DATA, auth_headers))["creditCards"][0]["id"]
        uploaded = (await _upload_card_statement(client, claim_id, card_id, auth_headers)).json()

        response = await client.get(
            f"/api/claims/{claim_id}/financial-step/card-statements/download",
            params={"fileKey": uploaded["fileKey"], "fileName": "january.pdf"},
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.content == b"%PDF-1.4"
        assert response.headers["content-type"] == "application/pdf"

    async def test_download_outside_claim_prefix(
        self,
        client: AsyncClient,
        auth_headers: dict,
        test_claim: dict
    ):
        """Test keys outside this claim's namespace are refused before storage is read."""
        for file_key in (
            "claims/financial/other-claim/card/secret.pdf",
            f"claims/financial/{test_claim['id']}/../other-claim/card/secret.pdf",
            f"claims/os-docs/{test_claim['id']}/ID/doc.pdf",
        ):
            response = await client.get(
                f"/api/claims/{test_claim['id']}/financial-step/bank-statements/download",
                params={"fileKey": file_key},
                headers=auth_headers
            )
            assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_download_missing_object(self, client: AsyncClient, auth_headers: dict, test_claim: dict):
        response = await client.get(
            f"/api/claims/{test_claim['id']}/financial-step/card-statements/download",
            params={"fileKey": f"claims/financial/{test_claim['id']}/card/gone.pdf"},
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_unknown_statement_kind(self, client: AsyncClient, auth_headers: dict, test_claim: dict):
        response = await client.get(
            f"/api/claims/{test_claim['id']}/financial-step/loan-statements/download",
            params={"fileKey": "x"},
            headers=auth_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
