from typing import List, Any
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
import logging
from app.core.database import get_db
from app.core.auth import get_current_user, get_current_admin
from app.crud import user as user_crud
from app.crud import partner as partner_crud
from app.crud import case as case_crud
from app.db.models.user import User
from app.schemas.user import UserCreate, UserUpdate, UserResponse, UserSummary

logger = logging.getLogger(__name__)
router = APIRouter()

async def _check_partner(db: AsyncSession, partner_id: str) -> None:
    if partner_id and not await partner_crud.get_partner(db, partner_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Partner not found"
        )

@router.get("", response_model=List[UserResponse])
async def read_users(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    skip: int = Query(0, ge=0, description="Skip N records"),
    limit: int = Query(100, ge=1, le=500, description="Limit to N records")
) -> Any:
    """
    Retrieve users.
    """
    logger.info(f"User list requested by user: {current_user.id}")
    return await user_crud.get_users(db, skip=skip, limit=limit)

@router.get("/search", response_model=List[UserSummary])
async def search_users(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    q: str = Query("", description="Part of an email address")
) -> Any:
    """
    Find users whose email contains the query. A blank query finds nothing.
    """
    return await user_crud.search_users_by_email(db, q)

@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    *,
    db: AsyncSession = Depends(get_db),
    user_in: UserCreate,
    current_user: User = Depends(get_current_admin)
) -> Any:
    """
    Create new user.

    Requires admin role.
    """
    logger.info(f"User creation requested by user: {current_user.id}")

    if await user_crud.get_user_by_email(db, user_in.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists"
        )
    await _check_partner(db, user_in.partner_id)

    user = await user_crud.create_user(db, user_in)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user"
        )

    logger.info(f"User created successfully: {user.id}")
    return user

@router.get("/{user_id}", response_model=UserResponse)
async def read_user(
    *,
    db: AsyncSession = Depends(get_db),
    user_id: str = Path(..., description="The ID of the user to retrieve"),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get a specific user by id.
    """
    user = await user_crud.get_user(db, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user

@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    *,
    db: AsyncSession = Depends(get_db),
    user_id: str = Path(..., description="The ID of the user to update"),
    user_in: UserUpdate,
    current_user: User = Depends(get_current_admin)
) -> Any:
    """
    Update a user.

    Requires admin role. A blank password keeps the current one.
    """
    logger.info(f"User update requested for {user_id} by user: {current_user.id}")

    user = await user_crud.get_user(db, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    if user_in.email and user_in.email != user.email:
        if await user_crud.get_user_by_email(db, user_in.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User with this email already exists"
            )
    await _check_partner(db, user_in.partner_id)

    updated_user = await user_crud.update_user(db, user_id, user_in)
    if not updated_user:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update user"
        )

    logger.info(f"User updated successfully: {user_id}")
    return updated_user

@router.delete("/{user_id}")
async def delete_user(
    *,
    db: AsyncSession = Depends(get_db),
    user_id: str = Path(..., description="The ID of the user to delete"),
    current_user: User = Depends(get_current_admin)
) -> Any:
    """
    Delete a user.

    Requires admin role. Users who created cases are kept.
    """
    logger.info(f"User deletion requested for {user_id} by user: {current_user.id}")

    user = await user_crud.get_user(db, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    created_cases = await case_crud.count_cases_created_by(db, user_id)
    if created_cases:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User has created cases and cannot be deleted"
        )

    if not await user_crud.delete_user(db, user_id):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete user"
        )

    logger.info(f"User deleted successfully: {user_id}")
    return {"success": True, "message": "User deleted successfully"}
