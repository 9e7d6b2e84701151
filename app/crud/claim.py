from typing import List, Optional, Union, Dict, Any
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging
from app.db.models import Claim, ClaimStatus
from app.schemas.claim import ClaimCreate, ClaimUpdate

logger = logging.getLogger(__name__)

async def get_claim(db: AsyncSession, claim_id: str) -> Optional[Claim]:
    try:
        result = await db.execute(select(Claim).where(Claim.id == claim_id))
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_claim: {e}")
        return None

async def get_claims(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 100,
    status: Optional[ClaimStatus] = None
) -> List[Claim]:
    """
    Get claims newest first, optionally narrowed to one status.
    """
    try:
        query = select(Claim)
        if status is not None:
            query = query.where(Claim.status == status)
        result = await db.execute(query.order_by(Claim.created_at.desc()).offset(skip).limit(limit))
        return list(result.scalars().all())
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_claims: {e}")
        return []

async def get_claim_statuses(db: AsyncSession) -> Optional[List[ClaimStatus]]:
    """
    Status of every claim, for the dashboard aggregation.
    """
    try:
        result = await db.execute(select(Claim.status))
        return list(result.scalars().all())
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_claim_statuses: {e}")
        return None

async def create_claim(db: AsyncSession, claim: ClaimCreate, user_id: str) -> Optional[Claim]:
    try:
        db_claim = Claim(**claim.model_dump(), user_id=user_id)
        db.add(db_claim)
        await db.commit()
        await db.refresh(db_claim)
        logger.info(f"Created claim {db_claim.id} in status {db_claim.status.value}")
        return db_claim
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in create_claim: {e}")
        return None

async def update_claim(
    db: AsyncSession,
    claim_id: str,
    claim_in: Union[ClaimUpdate, Dict[str, Any]]
) -> Optional[Claim]:
    try:
        db_claim = await get_claim(db, claim_id)
        if not db_claim:
            return None

        if isinstance(claim_in, dict):
            update_data = claim_in
        else:
            update_data = claim_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            setattr(db_claim, field, value)

        await db.commit()
        await db.refresh(db_claim)
        return db_claim
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in update_claim: {e}")
        return None

async def delete_claim(db: AsyncSession, claim_id: str) -> bool:
    """
    Delete a claim; its financial and offboarding steps go with it.
    """
    try:
        db_claim = await get_claim(db, claim_id)
        if not db_claim:
            return False

        await db.delete(db_claim)
        await db.commit()
        return True
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in delete_claim: {e}")
        return False
