from typing import Optional
from datetime import datetime
from pydantic import EmailStr, Field, field_validator
from app.db.models.user import UserRole
from app.db.models.partner import PartnerType
from app.schemas.base import BaseSchema, CamelModel, OptionalText, reject_null

class PartnerInfo(CamelModel):
    id: str
    name: str
    type: PartnerType

class UserCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: Optional[str] = Field(None, min_length=6)
    role: UserRole = UserRole.USER
    partner_id: OptionalText = None

class UserUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    # Blank keeps the current password
    password: OptionalText = None
    role: Optional[UserRole] = None
    partner_id: OptionalText = None

    @field_validator("email", "role")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

class User(BaseSchema):
    name: Optional[str] = None
    email: str
    role: UserRole
    partner_id: Optional[str] = None

class UserResponse(User):
    partner: Optional[PartnerInfo] = None

class UserSummary(CamelModel):
    id: str
    name: Optional[str] = None
    email: str
