from typing import Optional, List, Any, Dict, Union
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
import logging
from app.db.models import User
from app.schemas.user import UserCreate, UserUpdate
from app.core.security import get_password_hash

logger = logging.getLogger(__name__)

USER_SEARCH_LIMIT = 5

def _user_query():
    return select(User).options(selectinload(User.partner)).execution_options(populate_existing=True)

async def get_user(db: AsyncSession, user_id: str) -> Optional[User]:
    try:
        result = await db.execute(_user_query().where(User.id == user_id))
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_user: {e}")
        return None

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """
    Get a user by email from the database.
    """
    try:
        result = await db.execute(_user_query().where(User.email == email))
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_user_by_email: {e}")
        return None

async def get_users(db: AsyncSession, skip: int = 0, limit: int = 100) -> List[User]:
    try:
        result = await db.execute(
            _user_query().order_by(User.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_users: {e}")
        return []

async def search_users_by_email(db: AsyncSession, query: str, limit: int = USER_SEARCH_LIMIT) -> List[User]:
    """
    Case-insensitive substring match on email, for assignment pickers.
    """
    if not query or not query.strip():
        return []
    try:
        result = await db.execute(
            select(User)
            .where(User.email.icontains(query.strip(), autoescape=True))
            .order_by(User.email.asc())
            .limit(limit)
        )
        return list(result.scalars().all())
    except SQLAlchemyError as e:
        logger.error(f"Database error in search_users_by_email: {e}")
        return []

async def create_user(db: AsyncSession, user: UserCreate) -> Optional[User]:
    try:
        db_user = User(
            name=user.name,
            email=user.email,
            password=get_password_hash(user.password) if user.password else None,
            role=user.role,
            partner_id=user.partner_id,
        )
        db.add(db_user)
        await db.commit()
        return await get_user(db, db_user.id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in create_user: {e}")
        return None

async def update_user(db: AsyncSession, user_id: str, user: Union[UserUpdate, Dict[str, Any]]) -> Optional[User]:
    try:
        db_user = await get_user(db, user_id)
        if not db_user:
            return None

        if isinstance(user, dict):
            update_data = user
        else:
            update_data = user.model_dump(exclude_unset=True)

        # A blank password leaves the current one in place
        password = update_data.pop("password", None)
        if password:
            update_data["password"] = get_password_hash(password)

        for field, value in update_data.items():
            setattr(db_user, field, value)

        await db.commit()
        return await get_user(db, user_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in update_user: {e}")
        return None

async def delete_user(db: AsyncSession, user_id: str) -> bool:
    try:
        db_user = await get_user(db, user_id)
        if not db_user:
            return False

        await db.delete(db_user)
        await db.commit()
        return True
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in delete_user: {e}")
        return False
