from typing import Optional
from pydantic import Field, field_validator
from app.db.models.partner import PartnerType
from app.schemas.base import BaseSchema, CamelModel, OptionalEmail, OptionalText, reject_null
from app.schemas.service_provider import ServiceProviderSummary

class PartnerLinks(CamelModel):
    """Service provider ids per outsourced service category."""
    vehicle_recovery_id: OptionalText = None
    vehicle_storage_id: OptionalText = None
    replacement_hire_id: OptionalText = None
    vehicle_repairs_id: OptionalText = None
    independent_engineer_id: OptionalText = None
    vehicle_inspection_id: OptionalText = None

class PartnerCreate(PartnerLinks):
    type: PartnerType
    name: str = Field(..., min_length=1)
    email: OptionalEmail = None
    phone: OptionalText = None
    address: OptionalText = None

class PartnerUpdate(PartnerLinks):
    type: Optional[PartnerType] = None
    name: Optional[str] = Field(None, min_length=1)
    email: OptionalEmail = None
    phone: OptionalText = None
    address: OptionalText = None

    @field_validator("type", "name")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

class Partner(BaseSchema):
    type: PartnerType
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    vehicle_recovery_id: Optional[str] = None
    vehicle_storage_id: Optional[str] = None
    replacement_hire_id: Optional[str] = None
    vehicle_repairs_id: Optional[str] = None
    independent_engineer_id: Optional[str] = None
    vehicle_inspection_id: Optional[str] = None

class PartnerResponse(Partner):
    vehicle_recovery: Optional[ServiceProviderSummary] = None
    vehicle_storage: Optional[ServiceProviderSummary] = None
    replacement_hire: Optional[ServiceProviderSummary] = None
    vehicle_repairs: Optional[ServiceProviderSummary] = None
    independent_engineer: Optional[ServiceProviderSummary] = None
    vehicle_inspection: Optional[ServiceProviderSummary] = None
