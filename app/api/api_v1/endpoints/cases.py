from typing import List, Any, Optional, Dict
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
import logging
from app.core.database import get_db
from app.core.auth import get_current_user
from app.crud import case as case_crud
from app.crud import user as user_crud
from app.db.models.case import CasePriority, CaseStatus
from app.db.models.user import User
from app.schemas.case import CaseCreate, CaseUpdate, CaseResponse, CaseDetail, CaseStatusChange
from app.services.claim_workflow import next_case_status, previous_case_status

logger = logging.getLogger(__name__)
router = APIRouter()

async def _check_assignee(db: AsyncSession, user_id: Optional[str]) -> None:
    if user_id and not await user_crud.get_user(db, user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Assigned user not found"
        )

@router.post("", response_model=CaseDetail, status_code=status.HTTP_201_CREATED)
async def create_case(
    *,
    db: AsyncSession = Depends(get_db),
    case_in: CaseCreate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Create new case.

    The case gets the next "C-N" number and starts at the initial assessment
    step, whatever status the request carries.
    """
    logger.info(f"Case creation requested by user: {current_user.id}")
    await _check_assignee(db, case_in.assigned_to)

    new_case = await case_crud.create_case(db, case_in, created_by=current_user.id)
    if not new_case:
        logger.error("Failed to create case")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create case"
        )

    logger.info(f"Case created successfully: {new_case.case_id} ({new_case.id})")
    return new_case

@router.get("", response_model=List[CaseResponse])
async def get_cases(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    skip: int = Query(0, ge=0, description="Skip N records"),
    limit: int = Query(100, ge=1, le=500, description="Limit to N records"),
    status: Optional[CaseStatus] = Query(None, description="Filter by case status"),
    priority: Optional[CasePriority] = Query(None, description="Filter by priority"),
    assigned_to: Optional[str] = Query(None, alias="assignedTo", description="Filter by assignee")
) -> Any:
    """
    Retrieve cases with optional filtering.
    """
    logger.info(f"Case list requested by user: {current_user.id}")

    filters: Dict[str, Any] = {}
    if status:
        filters["status"] = status
    if priority:
        filters["priority"] = priority
    if assigned_to:
        filters["assigned_to"] = assigned_to

    cases = await case_crud.get_cases(db, skip=skip, limit=limit, filters=filters)

    logger.info(f"Retrieved {len(cases)} cases")
    return cases

@router.get("/{case_id}", response_model=CaseDetail)
async def read_case(
    *,
    db: AsyncSession = Depends(get_db),
    case_id: str = Path(..., description="The ID of the case to retrieve"),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get case by ID.
    """
    logger.info(f"Case {case_id} requested by user: {current_user.id}")

    case = await case_crud.get_case(db, case_id=case_id)
    if not case:
        logger.warning(f"Case not found: {case_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Case not found"
        )
    return case

@router.put("/{case_id}", response_model=CaseDetail)
async def update_case(
    *,
    db: AsyncSession = Depends(get_db),
    case_id: str = Path(..., description="The ID of the case to update"),
    case_in: CaseUpdate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Update case.
    """
    logger.info(f"Case update requested for {case_id} by user: {current_user.id}")

    case = await case_crud.get_case(db, case_id=case_id)
    if not case:
        logger.warning(f"Case not found for update: {case_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Case not found"
        )
    await _check_assignee(db, case_in.assigned_to)

    updated_case = await case_crud.update_case(db, case_id=case_id, case_in=case_in)
    if not updated_case:
        logger.error(f"Failed to update case: {case_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update case"
        )

    logger.info(f"Case updated successfully: {case_id}")
    return updated_case

@router.post("/{case_id}/status", response_model=CaseDetail)
async def change_case_status(
    *,
    db: AsyncSession = Depends(get_db),
    case_id: str = Path(..., description="The ID of the case to move"),
    change: CaseStatusChange,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Move a case one step forwards or backwards through its checklist.
    """
    case = await case_crud.get_case(db, case_id=case_id)
    if not case:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Case not found"
        )

    current_status = case.status
    if change.direction == "next":
        new_status = next_case_status(current_status)
    else:
        new_status = previous_case_status(current_status)

    if new_status is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Case is already at the {'last' if change.direction == 'next' else 'first'} step"
        )

    updated_case = await case_crud.set_case_status(db, case_id, new_status)
    if not updated_case:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update case status"
        )

    logger.info(f"Case {case_id} moved {current_status.value} -> {new_status.value} by user: {current_user.id}")
    return updated_case
