from typing import List, Optional, Union, Dict, Any
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging
from app.db.models import Case, CaseStatus, InitialAssessment
from app.schemas.case import CaseCreate, CaseUpdate, InitialAssessmentFields
from app.services.case_numbering import allocate_case_number

logger = logging.getLogger(__name__)

CREATE_CASE_ATTEMPTS = 2

def _case_query(with_assessments: bool = False):
    options = [selectinload(Case.assigned_to_user), selectinload(Case.created_by_user)]
    if with_assessments:
        options.append(selectinload(Case.initial_assessments))
    return select(Case).options(*options).execution_options(populate_existing=True)

async def get_case(db: AsyncSession, case_id: str) -> Optional[Case]:
    """
    Get a case by ID with its users and initial assessments loaded.
    """
    try:
        result = await db.execute(_case_query(with_assessments=True).where(Case.id == case_id))
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_case: {e}")
        return None

async def get_case_by_number(db: AsyncSession, case_number: str) -> Optional[Case]:
    try:
        result = await db.execute(_case_query().where(Case.case_id == case_number))
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_case_by_number: {e}")
        return None

async def get_cases(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 100,
    filters: Optional[Dict[str, Any]] = None
) -> List[Case]:
    """
    Get a list of cases with optional filtering, newest first.
    """
    try:
        query = _case_query()

        if filters:
            if status := filters.get("status"):
                query = query.where(Case.status == status)
            if assigned_to := filters.get("assigned_to"):
                query = query.where(Case.assigned_to == assigned_to)
            if priority := filters.get("priority"):
                query = query.where(Case.priority == priority)

        query = query.order_by(Case.created_at.desc()).offset(skip).limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_cases: {e}")
        return []

async def count_cases_created_by(db: AsyncSession, user_id: str) -> Optional[int]:
    try:
        result = await db.execute(select(func.count(Case.id)).where(Case.created_by == user_id))
        return result.scalar_one()
    except SQLAlchemyError as e:
        logger.error(f"Database error in count_cases_created_by: {e}")
        return None

async def create_case(db: AsyncSession, case: CaseCreate, created_by: str) -> Optional[Case]:
    """
    Create a case and its initial assessment in one transaction.

    The case number comes from the locked counter row and the status is
    always the first pipeline step. Two first-ever creations can both try to
    insert the counter row; the loser is retried once against the row the
    winner committed.
    """
    for attempt in range(CREATE_CASE_ATTEMPTS):
        try:
            case_number = await allocate_case_number(db)
            db_case = Case(
                case_id=case_number,
                title=case.title,
                client=case.client,
                status=CaseStatus.INITIAL_ASSESSMENT,
                priority=case.priority,
                assigned_to=case.assigned_to,
                created_by=created_by,
            )
            db.add(db_case)
            await db.flush()

            assessment_data = case.model_dump(include=set(InitialAssessmentFields.model_fields))
            db.add(InitialAssessment(case_id=db_case.id, **assessment_data))

            await db.commit()
            logger.info(f"Created case {case_number} ({db_case.id})")
            return await get_case(db, db_case.id)
        except IntegrityError as e:
            await db.rollback()
            if attempt + 1 < CREATE_CASE_ATTEMPTS:
                logger.warning(f"Case number conflict in create_case, retrying: {e}")
                continue
            logger.error(f"Database error in create_case: {e}")
            return None
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Database error in create_case: {e}")
            return None

async def update_case(
    db: AsyncSession,
    case_id: str,
    case_in: Union[CaseUpdate, Dict[str, Any]]
) -> Optional[Case]:
    try:
        db_case = await get_case(db, case_id)
        if not db_case:
            return None

        if isinstance(case_in, dict):
            update_data = case_in
        else:
            update_data = case_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            setattr(db_case, field, value)

        await db.commit()
        return await get_case(db, case_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in update_case: {e}")
        return None

async def set_case_status(db: AsyncSession, case_id: str, new_status: CaseStatus) -> Optional[Case]:
    return await update_case(db, case_id, {"status": new_status})
