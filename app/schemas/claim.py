from typing import Dict, List, Optional
from datetime import date
from pydantic import Field, field_validator
from app.db.models.claim import ClaimStatus, ClaimType
from app.schemas.base import BaseSchema, CamelModel, OptionalDate, OptionalText, reject_null
from app.services.claim_workflow import INTAKE_STAGES

class ClaimCreate(CamelModel):
    date_of_accident: date
    type: ClaimType
    status: ClaimStatus = ClaimStatus.PENDING_TRIAGE
    client_name: str = Field(..., min_length=1)
    client_mobile: str = Field(..., min_length=1)
    client_dob: date
    client_post_code: str = Field(..., min_length=1)
    additional_driver_name: OptionalText = None
    additional_driver_mobile: OptionalText = None
    additional_driver_dob: OptionalDate = None
    additional_driver_post_code: OptionalText = None
    tpi_insurer_name: OptionalText = None
    tpi_insurer_contact: OptionalText = None
    partner_id: OptionalText = None
    # File uploaded through /claims/upload before the claim existed
    uploaded_file_key: OptionalText = None
    uploaded_file_name: OptionalText = None

    @field_validator("status")
    @classmethod
    def validate_intake_status(cls, v: ClaimStatus) -> ClaimStatus:
        if v not in INTAKE_STAGES:
            raise ValueError(
                f"Invalid status value: {v.value}. Claims can only be created in: "
                f"{[s.value for s in INTAKE_STAGES]}"
            )
        return v

class ClaimUpdate(CamelModel):
    date_of_accident: Optional[date] = None
    type: Optional[ClaimType] = None
    status: Optional[ClaimStatus] = None
    client_name: Optional[str] = Field(None, min_length=1)
    client_mobile: Optional[str] = Field(None, min_length=1)
    client_dob: Optional[date] = None
    client_post_code: Optional[str] = Field(None, min_length=1)
    additional_driver_name: OptionalText = None
    additional_driver_mobile: OptionalText = None
    additional_driver_dob: OptionalDate = None
    additional_driver_post_code: OptionalText = None
    tpi_insurer_name: OptionalText = None
    tpi_insurer_contact: OptionalText = None
    partner_id: OptionalText = None

    @field_validator(
        "date_of_accident", "type", "status", "client_name", "client_mobile", "client_dob", "client_post_code"
    )
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

class Claim(BaseSchema):
    type: ClaimType
    status: ClaimStatus
    date_of_accident: date
    client_name: str
    client_mobile: str
    client_dob: date
    client_post_code: str
    additional_driver_name: Optional[str] = None
    additional_driver_mobile: Optional[str] = None
    additional_driver_dob: Optional[date] = None
    additional_driver_post_code: Optional[str] = None
    tpi_insurer_name: Optional[str] = None
    tpi_insurer_contact: Optional[str] = None
    uploaded_file_key: Optional[str] = None
    uploaded_file_name: Optional[str] = None
    user_id: Optional[str] = None
    partner_id: Optional[str] = None

class ClaimStats(CamelModel):
    status_counts: Dict[str, int]
    total: int

class ClaimTransitions(CamelModel):
    current: ClaimStatus
    allowed: List[ClaimStatus]
    enforced: bool

class FileUploadResponse(CamelModel):
    success: bool = True
    file_key: str
    file_name: str
