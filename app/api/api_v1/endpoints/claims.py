from typing import List, Any, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
import logging
from urllib.parse import unquote
from app.core.config import settings
from app.core.database import get_db
from app.core.auth import get_current_user
from app.core.s3 import S3Service, StorageError, StorageObjectNotFound, get_storage
from app.crud import claim as claim_crud
from app.crud import partner as partner_crud
from app.db.models.claim import ClaimStatus
from app.db.models.user import User
from app.schemas.claim import Claim, ClaimCreate, ClaimUpdate, ClaimStats, ClaimTransitions, FileUploadResponse
from app.services.claim_workflow import (
    InvalidStatusTransition, allowed_transitions, check_transition, summarize_statuses,
)
from app.services.storage_keys import claim_upload_key, key_in_namespace
from app.utils.files import SPREADSHEET_TYPES, file_response, require_content_type, upload_metadata

logger = logging.getLogger(__name__)
router = APIRouter()

async def _get_claim_or_404(db: AsyncSession, claim_id: str):
    claim = await claim_crud.get_claim(db, claim_id)
    if not claim:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Claim not found"
        )
    return claim

async def _check_partner(db: AsyncSession, partner_id: Optional[str]) -> None:
    if partner_id and not await partner_crud.get_partner(db, partner_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Partner not found"
        )

@router.get("", response_model=List[Claim])
async def read_claims(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    skip: int = Query(0, ge=0, description="Skip N records"),
    limit: int = Query(100, ge=1, le=500, description="Limit to N records"),
    claim_status: Optional[ClaimStatus] = Query(None, alias="status", description="Filter by claim status")
) -> Any:
    """
    Retrieve claims, newest first.
    """
    logger.info(f"Claim list requested by user: {current_user.id}")
    claims = await claim_crud.get_claims(db, skip=skip, limit=limit, status=claim_status)
    logger.info(f"Retrieved {len(claims)} claims")
    return claims

@router.get("/stats", response_model=ClaimStats)
async def read_claim_stats(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Claim counts per status for the triage dashboard.
    """
    statuses = await claim_crud.get_claim_statuses(db)
    if statuses is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch claim statistics"
        )
    return summarize_statuses(statuses)

@router.post("/upload", response_model=FileUploadResponse)
async def upload_claim_file(
    *,
    db: AsyncSession = Depends(get_db),
    storage: S3Service = Depends(get_storage),
    current_user: User = Depends(get_current_user),
    file: UploadFile = File(...),
    claim_id: Optional[str] = Form(None, alias="claimId")
) -> Any:
    """
    Upload a claim sheet (CSV or Excel).

    Without a claim id the file is parked under the pending prefix and its key
    is passed along when the claim is created.
    """
    content_type = require_content_type(
        file, SPREADSHEET_TYPES, "Invalid file type. Only CSV and Excel files are allowed."
    )
    file_name = file.filename or "upload"
    claim_id = (claim_id or "").strip() or None
    if claim_id:
        await _get_claim_or_404(db, claim_id)

    file_key = claim_upload_key(file_name, claim_id)
    try:
        await storage.put_object(
            file_key,
            await file.read(),
            content_type=content_type,
            metadata=upload_metadata(file_name, current_user.id),
        )
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload file"
        )

    if claim_id:
        updated = await claim_crud.update_claim(
            db, claim_id, {"uploaded_file_key": file_key, "uploaded_file_name": file_name}
        )
        if not updated:
            logger.error(f"Uploaded {file_key} but could not attach it to claim {claim_id}")

    logger.info(f"Claim file uploaded: {file_key} by user: {current_user.id}")
    return {"success": True, "file_key": file_key, "file_name": file_name}

@router.post("", response_model=Claim, status_code=status.HTTP_201_CREATED)
async def create_claim(
    *,
    db: AsyncSession = Depends(get_db),
    claim_in: ClaimCreate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Create new claim owned by the current user.
    """
    logger.info(f"Claim creation requested by user: {current_user.id}")
    await _check_partner(db, claim_in.partner_id)
    if claim_in.uploaded_file_key and not key_in_namespace(claim_in.uploaded_file_key, "claims/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid uploaded file key"
        )

    claim = await claim_crud.create_claim(db, claim_in, user_id=current_user.id)
    if not claim:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create claim"
        )

    logger.info(f"Claim created successfully: {claim.id}")
    return claim

@router.get("/{claim_id}", response_model=Claim)
async def read_claim(
    *,
    db: AsyncSession = Depends(get_db),
    claim_id: str = Path(..., description="The ID of the claim to retrieve"),
    current_user: User = Depends(get_current_user)
) -> Any:
    return await _get_claim_or_404(db, claim_id)

@router.put("/{claim_id}", response_model=Claim)
async def update_claim(
    *,
    db: AsyncSession = Depends(get_db),
    claim_id: str = Path(..., description="The ID of the claim to update"),
    claim_in: ClaimUpdate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Update claim.

    Any status may be set. Moves that are not on the workflow table are
    logged, or rejected with 409 when transitions are enforced.
    """
    logger.info(f"Claim update requested for {claim_id} by user: {current_user.id}")

    claim = await _get_claim_or_404(db, claim_id)
    await _check_partner(db, claim_in.partner_id)

    if claim_in.status is not None:
        try:
            check_transition(claim.status, claim_in.status, enforce=settings.ENFORCE_CLAIM_TRANSITIONS)
        except InvalidStatusTransition as e:
            logger.info(f"Rejected status change for claim {claim_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=str(e)
            )

    updated_claim = await claim_crud.update_claim(db, claim_id, claim_in)
    if not updated_claim:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update claim"
        )

    logger.info(f"Claim updated successfully: {claim_id}")
    return updated_claim

@router.delete("/{claim_id}")
async def delete_claim(
    *,
    db: AsyncSession = Depends(get_db),
    claim_id: str = Path(..., description="The ID of the claim to delete"),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Delete claim together with its financial and offboarding steps.
    """
    logger.info(f"Claim deletion requested for {claim_id} by user: {current_user.id}")
    await _get_claim_or_404(db, claim_id)

    if not await claim_crud.delete_claim(db, claim_id):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete claim"
        )

    logger.info(f"Claim deleted successfully: {claim_id}")
    return {"success": True, "message": "Claim deleted successfully"}

@router.get("/{claim_id}/transitions", response_model=ClaimTransitions)
async def read_claim_transitions(
    *,
    db: AsyncSession = Depends(get_db),
    claim_id: str = Path(..., description="The ID of the claim"),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Statuses the claim is expected to move to next.
    """
    claim = await _get_claim_or_404(db, claim_id)
    return {
        "current": claim.status,
        "allowed": allowed_transitions(claim.status),
        "enforced": settings.ENFORCE_CLAIM_TRANSITIONS,
    }

@router.get("/{claim_id}/download")
async def download_claim_file(
    *,
    db: AsyncSession = Depends(get_db),
    storage: S3Service = Depends(get_storage),
    claim_id: str = Path(..., description="The ID of the claim"),
    current_user: User = Depends(get_current_user)
):
    """
    Download the claim sheet uploaded for this claim.
    """
    claim = await _get_claim_or_404(db, claim_id)
    if not claim.uploaded_file_key:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No file uploaded for this claim"
        )

    try:
        stored = await storage.get_object(claim.uploaded_file_key)
    except StorageObjectNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found in storage"
        )
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to download file"
        )

    file_name = (
        claim.uploaded_file_name
        or unquote(stored.metadata.get("originalName", ""))
        or claim.uploaded_file_key.rsplit("/", 1)[-1]
    )
    return file_response(stored, file_name, disposition="attachment")
