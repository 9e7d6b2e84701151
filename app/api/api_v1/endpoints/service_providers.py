from typing import List, Any
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
import logging
from app.core.database import get_db
from app.core.auth import get_current_user
from app.crud import service_provider as service_provider_crud
from app.db.models.user import User
from app.schemas.service_provider import (
    ServiceProvider, ServiceProviderCreate, ServiceProviderUpdate, ServiceProviderSummary,
)

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=List[ServiceProvider])
async def read_service_providers(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    skip: int = Query(0, ge=0, description="Skip N records"),
    limit: int = Query(100, ge=1, le=500, description="Limit to N records")
) -> Any:
    """
    Retrieve service providers.
    """
    logger.info(f"Service provider list requested by user: {current_user.id}")
    return await service_provider_crud.get_service_providers(db, skip=skip, limit=limit)

@router.get("/search", response_model=List[ServiceProviderSummary])
async def search_service_providers(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    q: str = Query("", description="Part of a provider name")
) -> Any:
    return await service_provider_crud.search_service_providers(db, q)

@router.post("", response_model=ServiceProvider, status_code=status.HTTP_201_CREATED)
async def create_service_provider(
    *,
    db: AsyncSession = Depends(get_db),
    service_provider_in: ServiceProviderCreate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Create new service provider.
    """
    logger.info(f"Service provider creation requested by user: {current_user.id}")

    service_provider = await service_provider_crud.create_service_provider(db, service_provider_in)
    if not service_provider:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create service provider"
        )

    logger.info(f"Service provider created successfully: {service_provider.id}")
    return service_provider

@router.get("/{service_provider_id}", response_model=ServiceProvider)
async def read_service_provider(
    *,
    db: AsyncSession = Depends(get_db),
    service_provider_id: str = Path(..., description="The ID of the service provider"),
    current_user: User = Depends(get_current_user)
) -> Any:
    service_provider = await service_provider_crud.get_service_provider(db, service_provider_id)
    if not service_provider:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service provider not found"
        )
    return service_provider

@router.put("/{service_provider_id}", response_model=ServiceProvider)
async def update_service_provider(
    *,
    db: AsyncSession = Depends(get_db),
    service_provider_id: str = Path(..., description="The ID of the service provider"),
    service_provider_in: ServiceProviderUpdate,
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Update a service provider.
    """
    logger.info(f"Service provider update requested for {service_provider_id} by user: {current_user.id}")

    if not await service_provider_crud.get_service_provider(db, service_provider_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service provider not found"
        )

    service_provider = await service_provider_crud.update_service_provider(
        db, service_provider_id, service_provider_in
    )
    if not service_provider:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update service provider"
        )
    return service_provider

@router.delete("/{service_provider_id}")
async def delete_service_provider(
    *,
    db: AsyncSession = Depends(get_db),
    service_provider_id: str = Path(..., description="The ID of the service provider"),
    current_user: User = Depends(get_current_user)
) -> Any:
    """
    Delete a service provider. Partner links to it are cleared.
    """
    logger.info(f"Service provider deletion requested for {service_provider_id} by user: {current_user.id}")

    if not await service_provider_crud.get_service_provider(db, service_provider_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service provider not found"
        )

    if not await service_provider_crud.delete_service_provider(db, service_provider_id):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete service provider"
        )

    logger.info(f"Service provider deleted successfully: {service_provider_id}")
    return {"success": True, "message": "Service provider deleted successfully"}
