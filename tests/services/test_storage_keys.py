import re

from app.services.storage_keys import (
    claim_upload_key,
    financial_prefix,
    financial_statement_key,
    key_in_namespace,
    offboarding_document_key,
    offboarding_prefix,
)

class TestStorageKeys:
    def test_claim_upload_key_with_claim(self):
        key = claim_upload_key("sheet.xlsx", "claim-1")
        assert re.fullmatch(r"claims/claim-1/[0-9a-f]{32}\.xlsx", key)

    def test_claim_upload_key_pending(self):
        key = claim_upload_key("sheet.csv")
        assert re.fullmatch(r"claims/pending/\d{13}-[0-9a-f]{32}\.csv", key)

    def test_statement_key(self):
        key = financial_statement_key("claim-1", "card-9", "jan.pdf")
        assert re.fullmatch(r"claims/financial/claim-1/card-9/\d{13}-[0-9a-f]{32}\.pdf", key)
        assert key_in_namespace(key, financial_prefix("claim-1"))

    def test_offboarding_key(self):
        key = offboarding_document_key("claim-1", "V5C", "v5c.png")
        assert re.fullmatch(r"claims/os-docs/claim-1/V5C/\d{13}-[0-9a-f]{32}\.png", key)
        assert key_in_namespace(key, offboarding_prefix("claim-1"))

    def test_keys_are_unique(self):
        assert claim_upload_key("a.csv") != claim_upload_key("a.csv")

class TestKeyNamespace:
    def test_other_claim_rejected(self):
        assert not key_in_namespace("claims/financial/claim-2/x.pdf", financial_prefix("claim-1"))

    def test_prefix_collision_rejected(self):
        """A claim id that extends another is not inside its namespace."""
        assert not key_in_namespace("claims/financial/claim-10/x.pdf", financial_prefix("claim-1"))

    def test_parent_segments_rejected(self):
        assert not key_in_namespace("claims/financial/claim-1/../claim-2/x.pdf", financial_prefix("claim-1"))

    def test_bare_prefix_rejected(self):
        assert not key_in_namespace("claims/financial/claim-1/", financial_prefix("claim-1"))
        assert not key_in_namespace("", financial_prefix("claim-1"))
