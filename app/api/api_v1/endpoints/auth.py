from typing import Any
from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
import logging
from app.core.auth import get_current_user
from app.core.config import settings
from app.core.database import get_db
from app.core.security import create_access_token, verify_password
from app.crud import user as user_crud
from app.db.models.user import User
from app.schemas.auth import Token
from app.schemas.user import UserResponse

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/login", response_model=Token)
async def login(
    response: Response,
    db: AsyncSession = Depends(get_db),
    form_data: OAuth2PasswordRequestForm = Depends()
) -> Any:
    """
    Login with email and password.

    The token is returned in the body and also set as the session cookie.
    """
    user = await user_crud.get_user_by_email(db, form_data.username)
    if not user or not verify_password(form_data.password, user.password):
        logger.info(f"Failed login for {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        user.id, claims={"email": user.email, "role": user.role.value}
    )
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_SECONDS,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    logger.info(f"User logged in: {user.id}")
    return {"access_token": access_token, "token_type": "bearer"}

@router.post("/logout")
async def logout(response: Response) -> Any:
    """
    Clear the session cookie.
    """
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"success": True, "message": "Successfully logged out"}

@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: User = Depends(get_current_user)) -> Any:
    """
    Get current user.
    """
    return current_user
