from typing import List, Optional
from datetime import datetime
from pydantic import Field, StrictBool
from app.schemas.base import CamelModel

class OffboardingDocument(CamelModel):
    id: str
    offboarding_step_id: str
    document_type: str
    file_key: Optional[str] = None
    file_name: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    is_excluded: bool
    excluded_at: Optional[datetime] = None
    created_at: datetime

class OffboardingStep(CamelModel):
    id: str
    claim_id: str
    documents: List[OffboardingDocument] = []
    created_at: datetime

class DocumentExclusionUpdate(CamelModel):
    document_type: str = Field(..., min_length=1)
    is_excluded: StrictBool

class DocumentDelete(CamelModel):
    document_id: str = Field(..., min_length=1)

class DocumentResponse(CamelModel):
    success: bool = True
    document: OffboardingDocument

class DocumentUploadResponse(DocumentResponse):
    file_key: str
    file_name: str
