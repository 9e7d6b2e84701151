from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import SQLAlchemyError
import logging
from app.db.base_class import utcnow
from app.db.models import OffboardingStep, OffboardingDocument

logger = logging.getLogger(__name__)

async def get_offboarding_step(db: AsyncSession, claim_id: str) -> Optional[OffboardingStep]:
    try:
        result = await db.execute(
            select(OffboardingStep)
            .options(selectinload(OffboardingStep.documents))
            .where(OffboardingStep.claim_id == claim_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_offboarding_step: {e}")
        return None

async def _get_or_create_step(db: AsyncSession, claim_id: str) -> OffboardingStep:
    result = await db.execute(select(OffboardingStep).where(OffboardingStep.claim_id == claim_id))
    step = result.scalar_one_or_none()
    if step is None:
        step = OffboardingStep(claim_id=claim_id)
        db.add(step)
        await db.flush()
    return step

async def _get_document_by_type(db: AsyncSession, step_id: str, document_type: str) -> Optional[OffboardingDocument]:
    result = await db.execute(
        select(OffboardingDocument).where(
            OffboardingDocument.offboarding_step_id == step_id,
            OffboardingDocument.document_type == document_type,
        )
    )
    return result.scalar_one_or_none()

async def save_document_file(
    db: AsyncSession,
    claim_id: str,
    document_type: str,
    file_key: str,
    file_name: str,
) -> Optional[OffboardingDocument]:
    """
    Record an uploaded file for a document type.

    A document type has at most one row per step; a new upload replaces the
    file in place and clears any exclusion.
    """
    try:
        step = await _get_or_create_step(db, claim_id)
        document = await _get_document_by_type(db, step.id, document_type)
        if document is None:
            document = OffboardingDocument(offboarding_step_id=step.id, document_type=document_type)
            db.add(document)

        document.file_key = file_key
        document.file_name = file_name
        document.uploaded_at = utcnow()
        document.is_excluded = False
        document.excluded_at = None

        await db.commit()
        await db.refresh(document)
        return document
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in save_document_file: {e}")
        return None

async def set_document_exclusion(
    db: AsyncSession,
    step: OffboardingStep,
    document_type: str,
    is_excluded: bool,
) -> Optional[OffboardingDocument]:
    """
    Mark a document type excluded (or not). Creates a placeholder row when
    nothing was uploaded for the type yet.
    """
    try:
        document = await _get_document_by_type(db, step.id, document_type)
        if document is None:
            document = OffboardingDocument(offboarding_step_id=step.id, document_type=document_type)
            db.add(document)

        document.is_excluded = is_excluded
        document.excluded_at = utcnow() if is_excluded else None

        await db.commit()
        await db.refresh(document)
        return document
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in set_document_exclusion: {e}")
        return None

async def get_document(db: AsyncSession, document_id: str) -> Optional[OffboardingDocument]:
    try:
        result = await db.execute(
            select(OffboardingDocument)
            .options(selectinload(OffboardingDocument.offboarding_step))
            .where(OffboardingDocument.id == document_id)
        )
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_document: {e}")
        return None

async def get_document_by_file_key(db: AsyncSession, claim_id: str, file_key: str) -> Optional[OffboardingDocument]:
    try:
        result = await db.execute(
            select(OffboardingDocument)
            .join(OffboardingStep, OffboardingDocument.offboarding_step_id == OffboardingStep.id)
            .where(OffboardingStep.claim_id == claim_id, OffboardingDocument.file_key == file_key)
        )
        return result.scalars().first()
    except SQLAlchemyError as e:
        logger.error(f"Database error in get_document_by_file_key: {e}")
        return None

async def delete_document(db: AsyncSession, document: OffboardingDocument) -> bool:
    try:
        await db.delete(document)
        await db.commit()
        return True
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in delete_document: {e}")
        return False
