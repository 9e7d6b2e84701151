from typing import Optional
from pydantic import Field, field_validator
from app.db.models.service_provider import ServiceProviderType
from app.schemas.base import BaseSchema, CamelModel, OptionalEmail, OptionalText, reject_null


class ServiceProviderCreate(CamelModel):
    type: ServiceProviderType
    name: str = Field(..., min_length=1)
    email: OptionalEmail = None
    phone: OptionalText = None
    address: OptionalText = None

class ServiceProviderUpdate(CamelModel):
    type: Optional[ServiceProviderType] = None
    name: Optional[str] = Field(None, min_length=1)
    email: OptionalEmail = None
    phone: OptionalText = None
    address: OptionalText = None

    @field_validator("type", "name")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

class ServiceProvider(BaseSchema):
    type: ServiceProviderType
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

class ServiceProviderSummary(CamelModel):
    id: str
    name: str
    type: ServiceProviderType
