from typing import Optional
from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
import logging
from app.core.config import settings
from app.core.database import get_db
from app.core.security import decode_access_token, JWTError
from app.crud.user import get_user
from app.db.models.user import User, UserRole

logger = logging.getLogger(__name__)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
    session_token: Optional[str] = Cookie(default=None, alias=settings.SESSION_COOKIE_NAME),
) -> User:
    """
    Resolve the acting user from a bearer token or the session cookie.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )
    raw_token = token or session_token
    if not raw_token:
        raise credentials_exception

    try:
        payload = decode_access_token(raw_token)
    except JWTError as e:
        logger.info(f"Rejected session token: {e}")
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    db_user = await get_user(db, user_id=user_id)
    if not db_user:
        logger.warning(f"Session for unknown user {user_id}")
        raise credentials_exception

    return db_user


async def get_current_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Check the current user holds the ADMIN role.
    """
    if current_user.role != UserRole.ADMIN:
        logger.warning(f"Admin-only action attempted by user: {current_user.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions"
        )
    return current_user
