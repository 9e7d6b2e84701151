from typing import List, Any, Union
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from fastapi.exceptions import RequestValidationError
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession
import logging
from app.core.database import get_db
from app.core.auth import get_current_user
from app.crud import partner as partner_crud
from app.crud import service_provider as service_provider_crud
from app.db.models.user import User
from app.schemas.partner import PartnerCreate, PartnerLinks, PartnerUpdate, PartnerResponse

logger = logging.getLogger(__name__)
router = APIRouter()

async def _check_links(db: AsyncSession, partner_in: Union[PartnerCreate, PartnerUpdate]) -> None:
    """
    Every non-blank service-category id must name an existing service provider.
    """
    links = {
        field: getattr(partner_in, field)
        for field in PartnerLinks.model_fields
        if getattr(partner_in, field)
    }
    if not links:
        return

    existing = await service_provider_crud.get_existing_ids(db, links.values())
    if existing is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to check service providers"
        )

    errors = [
        {
            "loc": ("body", to_camel(field)),
            "msg": "Service provider not found",
            "type": "value_error",
        }
        for field, provider_id in links.items()
        if provider_id not in existing
    ]
    if errors:
        raise RequestValidationError(errors)

@router.get("", response_model=List[PartnerResponse])
async def read_partners(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    skip: int = Query(0, ge=0, description="Skip N records"),
    limit: int = Query(100, ge=1, le=500, description="Limit to N records")
) -> Any:
    """
    Retrieve partners with their service providers.
    """
    logger.info(f"Partner list requested by user: {current_user.id}")
    return await partner_crud.get_partners(db, skip=skip, limit=limit)

@router.post("", response_model=PartnerResponse, status_code=status.HTTP_201_CREATED)
async def create_partner(
    *,
    db: AsyncSession = Depends(get_db),
    partner_in: PartnerCreate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Create new partner.
    """
    logger.info(f"Partner creation requested by user: {current_user.id}")
    await _check_links(db, partner_in)

    partner = await partner_crud.create_partner(db, partner_in)
    if not partner:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create partner"
        )

    logger.info(f"Partner created successfully: {partner.id}")
    return partner

@router.get("/{partner_id}", response_model=PartnerResponse)
async def read_partner(
    *,
    db: AsyncSession = Depends(get_db),
    partner_id: str = Path(..., description="The ID of the partner to retrieve"),
    current_user: User = Depends(get_current_user)
) -> Any:
    partner = await partner_crud.get_partner(db, partner_id)
    if not partner:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Partner not found"
        )
    return partner

@router.put("/{partner_id}", response_model=PartnerResponse)
async def update_partner(
    *,
    db: AsyncSession = Depends(get_db),
    partner_id: str = Path(..., description="The ID of the partner to update"),
    partner_in: PartnerUpdate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Update partner.

    Service-category ids sent blank are cleared.
    """
    logger.info(f"Partner update requested for {partner_id} by user: {current_user.id}")

    if not await partner_crud.get_partner(db, partner_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Partner not found"
        )
    await _check_links(db, partner_in)

    partner = await partner_crud.update_partner(db, partner_id, partner_in)
    if not partner:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update partner"
        )

    logger.info(f"Partner updated successfully: {partner_id}")
    return partner

@router.delete("/{partner_id}")
async def delete_partner(
    *,
    db: AsyncSession = Depends(get_db),
    partner_id: str = Path(..., description="The ID of the partner to delete"),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Delete partner. Users and claims linked to it are kept and unlinked.
    """
    logger.info(f"Partner deletion requested for {partner_id} by user: {current_user.id}")

    if not await partner_crud.get_partner(db, partner_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Partner not found"
        )

    if not await partner_crud.delete_partner(db, partner_id):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete partner"
        )

    logger.info(f"Partner deleted successfully: {partner_id}")
    return {"success": True, "message": "Partner deleted successfully"}
