from typing import List, Optional, Dict, Any, Union
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
import logging
from app.db.models import Partner, SERVICE_CATEGORIES
from app.schemas.partner import PartnerCreate, PartnerUpdate

logger = logging.getLogger(__name__)

def _partner_query():
    return (
        select(Partner)
        .options(*(selectinload(getattr(Partner, category)) for category in SERVICE_CATEGORIES))
        .execution_options(populate_existing=True)
    )

async def get_partner(db: AsyncSession, partner_id: str) -> Optional[Partner]:
    """
    Get a partner with its service-category providers loaded.
    """
    try:
        result = await db.execute(_partner_query().where(Partner.id == partner_id))
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_partner: {e}")
        return None

async def get_partners(db: AsyncSession, skip: int = 0, limit: int = 100) -> List[Partner]:
    try:
        result = await db.execute(
            _partner_query().order_by(Partner.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_partners: {e}")
        return []

async def create_partner(db: AsyncSession, partner: PartnerCreate) -> Optional[Partner]:
    try:
        db_partner = Partner(**partner.model_dump())
        db.add(db_partner)
        await db.commit()
        return await get_partner(db, db_partner.id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in create_partner: {e}")
        return None

async def update_partner(db: AsyncSession, partner_id: str, partner_in: Union[PartnerUpdate, Dict[str, Any]]) -> Optional[Partner]:
    try:
        db_partner = await get_partner(db, partner_id)
        if not db_partner:
            return None

        if isinstance(partner_in, dict):
            update_data = partner_in
        else:
            update_data = partner_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            setattr(db_partner, field, value)

        await db.commit()
        return await get_partner(db, partner_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in update_partner: {e}")
        return None

async def delete_partner(db: AsyncSession, partner_id: str) -> bool:
    try:
        db_partner = await get_partner(db, partner_id)
        if not db_partner:
            return False

        await db.delete(db_partner)
        await db.commit()
        return True
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in delete_partner: {e}")
        return False
