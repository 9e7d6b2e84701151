"""
Object storage key layout.

Every key lives under ``claims/`` and is namespaced by the owning claim, so a
download request can be checked against the claim in its path before
anything is read from storage.
"""

import secrets
import time
from typing import Optional


def _random_id() -> str:
    return secrets.token_hex(16)


def _timestamp() -> int:
    return int(time.time() * 1000)


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1]


def claim_upload_key(filename: str, claim_id: Optional[str] = None) -> str:
    ext = file_extension(filename)
    if claim_id:
        return f"claims/{claim_id}/{_random_id()}.{ext}"
    return f"claims/pending/{_timestamp()}-{_random_id()}.{ext}"


def financial_prefix(claim_id: str) -> str:
    return f"claims/financial/{claim_id}/"


def financial_statement_key(claim_id: str, owner_id: str, filename: str) -> str:
    """Key for a bank or card statement; ``owner_id`` is the account or card id."""
    return f"{financial_prefix(claim_id)}{owner_id}/{_timestamp()}-{_random_id()}.{file_extension(filename)}"


def offboarding_prefix(claim_id: str) -> str:
    return f"claims/os-docs/{claim_id}/"


def offboarding_document_key(claim_id: str, document_type: str, filename: str) -> str:
    return f"{offboarding_prefix(claim_id)}{document_type}/{_timestamp()}-{_random_id()}.{file_extension(filename)}"


def key_in_namespace(file_key: str, prefix: str) -> bool:
    """
    True when ``file_key`` sits strictly below ``prefix``. Relative path
    segments are refused.
    """
    if not file_key or not file_key.startswith(prefix) or file_key == prefix:
        return False
    return ".." not in file_key.split("/")
