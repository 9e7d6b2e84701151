from typing import Any, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, status, Query, Path, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
import logging
from app.core.database import get_db
from app.core.auth import get_current_user
from app.core.s3 import S3Service, StorageError, StorageObjectNotFound, get_storage
from app.crud import claim as claim_crud
from app.crud import offboarding_step as offboarding_crud
from app.db.models.user import User
from app.schemas.offboarding_step import (
    DocumentDelete, DocumentExclusionUpdate, DocumentResponse, DocumentUploadResponse, OffboardingStep,
)
from app.services.storage_keys import key_in_namespace, offboarding_document_key, offboarding_prefix
from app.utils.files import DOCUMENT_TYPES, file_response, require_content_type, upload_metadata

logger = logging.getLogger(__name__)
router = APIRouter()

async def _require_claim(db: AsyncSession, claim_id: str) -> None:
    if not await claim_crud.get_claim(db, claim_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Claim not found"
        )

@router.get("/{claim_id}/offboarding-step", response_model=Optional[OffboardingStep])
async def read_offboarding_step(
    *,
    db: AsyncSession = Depends(get_db),
    claim_id: str = Path(..., description="The ID of the claim"),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Get the offboarding step of a claim with its documents, or null.
    """
    await _require_claim(db, claim_id)
    return await offboarding_crud.get_offboarding_step(db, claim_id)

@router.post("/{claim_id}/offboarding-step/documents", response_model=DocumentUploadResponse)
async def upload_document(
    *,
    db: AsyncSession = Depends(get_db),
    storage: S3Service = Depends(get_storage),
    claim_id: str = Path(..., description="The ID of the claim"),
    file: UploadFile = File(...),
    document_type: str = Form(..., alias="documentType", min_length=1),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Upload the file for one offboarding document type.

    Uploading again for the same type replaces the file and clears any
    exclusion.
    """
    content_type = require_content_type(
        file, DOCUMENT_TYPES, "Invalid file type. Only PDF and image files are allowed."
    )
    document_type = document_type.strip()
    if not document_type or "/" in document_type or document_type == "..":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid document type"
        )
    await _require_claim(db, claim_id)

    step = await offboarding_crud.get_offboarding_step(db, claim_id)
    previous_key = None
    if step:
        previous_key = next(
            (d.file_key for d in step.documents if d.document_type == document_type), None
        )

    file_name = file.filename or "document"
    file_key = offboarding_document_key(claim_id, document_type, file_name)
    try:
        await storage.put_object(
            file_key,
            await file.read(),
            content_type=content_type,
            metadata=upload_metadata(file_name, current_user.id, documentType=document_type),
        )
    except StorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload document"
        )

    document = await offboarding_crud.save_document_file(db, claim_id, document_type, file_key, file_name)
    if not document:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload document"
        )

    if previous_key and previous_key != file_key:
        try:
            await storage.delete_object(previous_key)
        except StorageError:
            logger.warning(
                f"Replaced offboarding document {document_type} but {previous_key} is still in storage"
            )

    logger.info(f"Uploaded offboarding document {document_type} for claim {claim_id}")
    return {"success": True, "document": document, "file_key": file_key, "file_name": file_name}

@router.put("/{claim_id}/offboarding-step/documents", response_model=DocumentResponse)
async def update_document_exclusion(
    *,
    db: AsyncSession = Depends(get_db),
    claim_id: str = Path(..., description="The ID of the claim"),
    update_in: DocumentExclusionUpdate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Exclude a document type from the offboarding pack, or include it again.
    """
    step = await offboarding_crud.get_offboarding_step(db, claim_id)
    if not step:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Offboarding step not found"
        )

    document = await offboarding_crud.set_document_exclusion(
        db, step, update_in.document_type, update_in.is_excluded
    )
    if not document:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update document"
        )
    return {"success": True, "document": document}

@router.delete("/{claim_id}/offboarding-step/documents")
async def delete_document(
    *,
    db: AsyncSession = Depends(get_db),
    storage: S3Service = Depends(get_storage),
    claim_id: str = Path(..., description="The ID of the claim"),
    delete_in: DocumentDelete = Body(...),
    current_user: User = Depends(get_current_user)
) -> Any:
    document = await offboarding_crud.get_document(db, delete_in.document_id)
    if not document:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )
    if document.offboarding_step.claim_id != claim_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Document does not belong to this claim"
        )

    file_key = document.file_key
    if not await offboarding_crud.delete_document(db, document):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete document"
        )

    if file_key:
        try:
            await storage.delete_object(file_key)
        except StorageError:
            logger.warning(f"Document {delete_in.document_id} deleted but {file_key} is still in storage")

    return {"success": True}

@router.get("/{claim_id}/offboarding-step/documents/download")
async def download_document(
    *,
    db: AsyncSession = Depends(get_db),
    storage: S3Service = Depends(get_storage),
    claim_id: str = Path(..., description="The ID of the claim"),
    file_key: Optional[str] = Query(None, alias="fileKey"),
    current_user: User = Depends(get_current_user)
):
    """
    View an offboarding document inline. The key must sit under this claim's
    offboarding prefix and belong to one of its documents.
    """
    if not file_key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File key is required"
        )
    if not key_in_namespace(file_key, offboarding_prefix(claim_id)):
        logger.warning(f"Refused document download outside claim {claim_id}: {file_key}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid file access"
        )

    document = await offboarding_crud.get_document_by_file_key(db, claim_id, file_key)
    if not document:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
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

    return file_response(stored, document.file_name or file_key.rsplit("/", 1)[-1], disposition="inline")
