import logging
import re
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.models import Case, IdCounter

logger = logging.getLogger(__name__)

CASE_NUMBER_PREFIX = "C-"
CASE_NUMBER_COUNTER = "case_number"

_CASE_NUMBER_RE = re.compile(r"^C-(\d+)$")


def parse_case_number(case_id: Optional[str]) -> Optional[int]:
    """
    Return the numeric part of a "C-N" case id, or None when it has another shape.
    """
    if not case_id:
        return None
    match = _CASE_NUMBER_RE.match(case_id.strip())
    return int(match.group(1)) if match else None


def format_case_number(number: int) -> str:
    return f"{CASE_NUMBER_PREFIX}{number}"


async def highest_case_number(db: AsyncSession) -> int:
    result = await db.execute(
        select(Case.case_id).where(Case.case_id.startswith(CASE_NUMBER_PREFIX))
    )
    numbers = [n for n in (parse_case_number(v) for v in result.scalars().all()) if n is not None]
    return max(numbers, default=0)


async def allocate_case_number(db: AsyncSession) -> str:
    """
    Reserve the next case number.

    The counter row is locked for the rest of the caller's transaction, so the
    case insert must be committed in the same transaction. The row is seeded
    from existing case ids the first time it is used.
    """
    result = await db.execute(
        select(IdCounter).where(IdCounter.name == CASE_NUMBER_COUNTER).with_for_update()
    )
    counter = result.scalar_one_or_none()
    if counter is None:
        seed = await highest_case_number(db)
        logger.info(f"Seeding case number counter at {seed}")
        counter = IdCounter(name=CASE_NUMBER_COUNTER, value=seed)
        db.add(counter)

    counter.value += 1
    return format_case_number(counter.value)
