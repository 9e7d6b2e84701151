from typing import List, Optional, Dict, Any, Iterable, Set, Union
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging
from app.db.models import ServiceProvider
from app.schemas.service_provider import ServiceProviderCreate, ServiceProviderUpdate

logger = logging.getLogger(__name__)

SERVICE_PROVIDER_SEARCH_LIMIT = 10

async def get_service_provider(db: AsyncSession, service_provider_id: str) -> Optional[ServiceProvider]:
    try:
        result = await db.execute(select(ServiceProvider).where(ServiceProvider.id == service_provider_id))
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_service_provider: {e}")
        return None

async def get_service_providers(db: AsyncSession, skip: int = 0, limit: int = 100) -> List[ServiceProvider]:
    try:
        result = await db.execute(
            select(ServiceProvider).order_by(ServiceProvider.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_service_providers: {e}")
        return []

async def search_service_providers(
    db: AsyncSession, query: str = "", limit: int = SERVICE_PROVIDER_SEARCH_LIMIT
) -> List[ServiceProvider]:
    """
    Name search for the partner service-category pickers. An empty query
    returns the first providers by name.
    """
    try:
        stmt = select(ServiceProvider)
        if query and query.strip():
            stmt = stmt.where(ServiceProvider.name.icontains(query.strip(), autoescape=True))
        result = await db.execute(stmt.order_by(ServiceProvider.name.asc()).limit(limit))
        return list(result.scalars().all())
    except SQLAlchemyError as e:
        logger.error(f"Database error in search_service_providers: {e}")
        return []

async def get_existing_ids(db: AsyncSession, ids: Iterable[str]) -> Optional[Set[str]]:
    """
    Return which of ``ids`` name a service provider, or None on database error.
    """
    wanted = {i for i in ids if i}
    if not wanted:
        return set()
    try:
        result = await db.execute(select(ServiceProvider.id).where(ServiceProvider.id.in_(wanted)))
        return set(result.scalars().all())
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_existing_ids: {e}")
        return None

async def create_service_provider(db: AsyncSession, service_provider: ServiceProviderCreate) -> Optional[ServiceProvider]:
    try:
        db_service_provider = ServiceProvider(**service_provider.model_dump())
        db.add(db_service_provider)
        await db.commit()
        await db.refresh(db_service_provider)
        return db_service_provider
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in create_service_provider: {e}")
        return None

async def update_service_provider(
    db: AsyncSession,
    service_provider_id: str,
    service_provider_in: Union[ServiceProviderUpdate, Dict[str, Any]]
) -> Optional[ServiceProvider]:
    try:
        db_service_provider = await get_service_provider(db, service_provider_id)
        if not db_service_provider:
            return None

        if isinstance(service_provider_in, dict):
            update_data = service_provider_in
        else:
            update_data = service_provider_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            setattr(db_service_provider, field, value)

        await db.commit()
        await db.refresh(db_service_provider)
        return db_service_provider
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in update_service_provider: {e}")
        return None

async def delete_service_provider(db: AsyncSession, service_provider_id: str) -> bool:
    try:
        db_service_provider = await get_service_provider(db, service_provider_id)
        if not db_service_provider:
            return False

        await db.delete(db_service_provider)
        await db.commit()
        return True
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in delete_service_provider: {e}")
        return False
