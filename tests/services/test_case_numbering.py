import pytest

from app.core.database import get_db_context
from app.db.models import Case, CasePriority, CaseStatus, IdCounter
from app.services.case_numbering import (
    CASE_NUMBER_COUNTER,
    allocate_case_number,
    format_case_number,
    parse_case_number,
)

pytestmark = pytest.mark.asyncio

class TestCaseNumberFormat:
    async def test_parse(self):
        assert parse_case_number("C-12") == 12
        assert parse_case_number("C-0") == 0
        assert parse_case_number("C-") is None
        assert parse_case_number("C-1a") is None
        assert parse_case_number("X-3") is None
        assert parse_case_number(None) is None

    async def test_format(self):
        assert format_case_number(7) == "C-7"

class TestAllocateCaseNumber:
    async def test_first_number(self, client):
        async with get_db_context() as db:
            assert await allocate_case_number(db) == "C-1"
            await db.commit()

            counter = await db.get(IdCounter, CASE_NUMBER_COUNTER)
            assert counter.value == 1

    async def test_sequential_numbers(self, client):
        async with get_db_context() as db:
            numbers = []
            for _ in range(3):
                numbers.append(await allocate_case_number(db))
                await db.commit()
        assert numbers == ["C-1", "C-2", "C-3"]

    async def test_seeded_from_existing_cases(self, client, test_user):
        async with get_db_context() as db:
            for case_id in ("C-3", "C-17", "IMPORTED-99"):
                db.add(Case(case_id=case_id, title="t", client="c", status=CaseStatus.OFFBOARDING,
                            priority=CasePriority.MEDIUM, created_by=test_user.id))
            await db.commit()

            assert await allocate_case_number(db) == "C-18"

    async def test_rollback_releases_number(self, client):
        async with get_db_context() as db:
            assert await allocate_case_number(db) == "C-1"
            await db.rollback()
            assert await allocate_case_number(db) == "C-1"
