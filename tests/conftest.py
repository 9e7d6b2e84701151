import os

# Settings are read at import time, so the test environment goes first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ["S3_ENSURE_BUCKET"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["ENFORCE_CLAIM_TRANSITIONS"] = "false"

from typing import AsyncGenerator, Dict, Optional
import pytest
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager

from app.core.database import get_db_context
from app.core.s3 import StoredObject, StorageObjectNotFound, get_storage
from app.core.security import create_access_token, get_password_hash
from app.db.models import User, UserRole
from main import app


class FakeStorage:
    """In-memory stand-in for the S3 bucket."""

    def __init__(self):
        self.objects: Dict[str, StoredObject] = {}
        self.deleted = []

    async def ensure_bucket(self) -> bool:
        return False

    async def put_object(self, file_key: str, body: bytes, content_type: Optional[str] = None,
                         metadata: Optional[Dict[str, str]] = None) -> None:
        self.objects[file_key] = StoredObject(
            body=body,
            content_type=content_type or "application/octet-stream",
            metadata=dict(metadata or {}),
        )

    async def get_object(self, file_key: str) -> StoredObject:
        if file_key not in self.objects:
            raise StorageObjectNotFound(file_key)
        return self.objects[file_key]

    async def delete_object(self, file_key: str) -> None:
        self.deleted.append(file_key)
        self.objects.pop(file_key, None)


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()

@pytest.fixture
async def client(storage) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client over a fresh in-memory database. Tables are created on
    startup and the database is dropped when the engine is disposed on
    shutdown.
    """
    app.dependency_overrides[get_storage] = lambda: storage
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    app.dependency_overrides.clear()

@pytest.fixture
def test_password() -> str:
    return "test_password123"

async def _create_user(email: str, password: str, role: UserRole, name: str) -> User:
    async with get_db_context() as db:
        user = User(name=name, email=email, password=get_password_hash(password), role=role)
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

@pytest.fixture
async def test_user(client, test_password) -> User:
    return await _create_user("user@example.com", test_password, UserRole.USER, "Test User")

@pytest.fixture
async def test_admin(client, test_password) -> User:
    return await _create_user("admin@example.com", test_password, UserRole.ADMIN, "Admin User")

@pytest.fixture
def auth_headers(test_user) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(test_user.id)}"}

@pytest.fixture
def admin_headers(test_admin) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(test_admin.id)}"}

@pytest.fixture
def claim_data() -> dict:
    return {
        "dateOfAccident": "2024-03-01",
        "type": "NON_FAULT",
        "clientName": "Jane Driver",
        "clientMobile": "07700900000",
        "clientDob": "1985-06-15",
        "clientPostCode": "SW1A 1AA",
    }

@pytest.fixture
async def test_claim(client, auth_headers, claim_data) -> dict:
    response = await client.post("/api/claims", json=claim_data, headers=auth_headers)
    assert response.status_code == 201
    return response.json()
