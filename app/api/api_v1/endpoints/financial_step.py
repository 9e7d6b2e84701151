from typing import Any, Optional
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
import logging
from app.core.database import get_db
from app.core.auth import get_current_user
from app.core.s3 import S3Service, StorageError, StorageObjectNotFound, get_storage
from app.crud import claim as claim_crud
from app.crud import financial_step as financial_step_crud
from app.db.models.user import User
from app.schemas.financial_step import FinancialStep, FinancialStepSave, StatementKind, StatementUploadResponse
from app.services.storage_keys import financial_prefix, financial_statement_key, key_in_namespace
from app.utils.files import DOCUMENT_TYPES, file_response, require_content_type, upload_metadata

logger = logging.getLogger(__name__)
router = APIRouter()

OWNER_LABELS = {
    StatementKind.CARD: "Credit card",
    StatementKind.BANK: "Bank account",
}

async def _require_claim(db: AsyncSession, claim_id: str) -> None:
    if not await claim_crud.get_claim(db, claim_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Claim not found"
        )

@router.get("/{claim_id}/financial-step", response_model=Optional[FinancialStep])
async def read_financial_step(
    *,
    db: AsyncSession = Depends(get_db),
    claim_id: str = Path(..., description="The ID of the claim"),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get the financial step of a claim, or null when none was saved yet.
    """
    await _require_claim(db, claim_id)
    return await financial_step_crud.get_financial_step(db, claim_id)

@router.post("/{claim_id}/financial-step", response_model=FinancialStep)
async def save_financial_step(
    *,
    db: AsyncSession = Depends(get_db),
    claim_id: str = Path(..., description="The ID of the claim"),
    step_in: FinancialStepSave,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Create or update the financial step of a claim.

    Each collection sent replaces the stored one: rows are matched by id and
    updated in place, new items are added and missing rows removed.
    Collections not sent are left alone.
    """
    logger.info(f"Financial step save requested for claim {claim_id} by user: {current_user.id}")
    await _require_claim(db, claim_id)

    step = await financial_step_crud.save_financial_step(db, claim_id, step_in)
    if not step:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save financial step"
        )
    return step

@router.delete("/{claim_id}/financial-step")
async def delete_financial_step(
    *,
    db: AsyncSession = Depends(get_db),
    claim_id: str = Path(..., description="The ID of the claim"),
    current_user: User = Depends(get_current_user)
) -> Any:
    logger.info(f"Financial step deletion requested for claim {claim_id} by user: {current_user.id}")
    await _require_claim(db, claim_id)

    if not await financial_step_crud.get_financial_step(db, claim_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Financial step not found"
        )
    if not await financial_step_crud.delete_financial_step(db, claim_id):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete financial step"
        )
    return {"success": True, "message": "Financial step deleted successfully"}

@router.post("/{claim_id}/financial-step/{kind}-statements", response_model=StatementUploadResponse)
async def upload_statement(
    *,
    db: AsyncSession = Depends(get_db),
    storage: S3Service = Depends(get_storage),
    claim_id: str = Path(..., description="The ID of the claim"),
    kind: StatementKind,
    file: UploadFile = File(...),
    credit_card_id: Optional[str] = Form(None, alias="creditCardId"),
    bank_account_id: Optional[str] = Form(None, alias="bankAccountId"),
    start_date: date = Form(..., alias="startDate"),
    end_date: date = Form(..., alias="endDate"),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Upload a statement (PDF or image) for a credit card or bank account of
    this claim.
    """
    owner_id = credit_card_id if kind == StatementKind.CARD else bank_account_id
    if not owner_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields"
        )
    content_type = require_content_type(
        file, DOCUMENT_TYPES, "Invalid file type. Only PDF and image files are allowed."
    )

    owner = await financial_step_crud.get_statement_owner(db, kind, owner_id)
    if not owner:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{OWNER_LABELS[kind]} not found"
        )
    if owner.financial_step.claim_id != claim_id:
        logger.warning(f"{OWNER_LABELS[kind]} {owner_id} is not part of claim {claim_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"{OWNER_LABELS[kind]} does not belong to this claim"
        )

    file_name = file.filename or "statement"
    file_key = financial_statement_key(claim_id, owner_id, file_name)
    try:
        await storage.put_object(
            file_key,
            await file.read(),
            content_type=content_type,
            metadata=upload_metadata(file_name, current_user.id, ownerId=owner_id),
        )
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload statement"
        )

    statement = await financial_step_crud.create_statement(
        db, kind, owner_id, start_date, end_date, file_key, file_name
    )
    if not statement:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload statement"
        )

    logger.info(f"Uploaded {kind.value} statement {statement.id} for claim {claim_id}")
    return {"success": True, "statement": statement, "file_key": file_key, "file_name": file_name}

@router.delete("/{claim_id}/financial-step/{kind}-statements")
async def delete_statement(
    *,
    db: AsyncSession = Depends(get_db),
    storage: S3Service = Depends(get_storage),
    claim_id: str = Path(..., description="The ID of the claim"),
    kind: StatementKind,
    statement_id: Optional[str] = Query(None, alias="statementId"),
    current_user: User = Depends(get_current_user)
) -> Any:
    if not statement_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Statement ID is required"
        )

    statement = await financial_step_crud.get_statement(db, kind, statement_id)
    if not statement:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Statement not found"
        )
    owner = statement.credit_card if kind == StatementKind.CARD else statement.bank_account
    if owner.financial_step.claim_id != claim_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Statement does not belong to this claim"
        )

    file_key = statement.file_key
    if not await financial_step_crud.delete_statement(db, statement):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete statement"
        )

    try:
        await storage.delete_object(file_key)
    except StorageError:
        logger.warning(f"Statement {statement_id} deleted but {file_key} is still in storage")

    return {"success": True}

@router.get("/{claim_id}/financial-step/{kind}-statements/download")
async def download_statement(
    *,
    storage: S3Service = Depends(get_storage),
    claim_id: str = Path(..., description="The ID of the claim"),
    kind: StatementKind,
    file_key: Optional[str] = Query(None, alias="fileKey"),
    file_name: Optional[str] = Query(None, alias="fileName"),
    current_user: User = Depends(get_current_user)
):
    """
    Download a statement file. The key must sit under this claim's
    financial prefix.
    """
    if not file_key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File key is required"
        )
    if not key_in_namespace(file_key, financial_prefix(claim_id)):
        logger.warning(f"Refused statement download outside claim {claim_id}: {file_key}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid file access"
        )

    try:
        stored = await storage.get_object(file_key)
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

    return file_response(stored, file_name or file_key.rsplit("/", 1)[-1], disposition="attachment")
