from app.schemas.user import User, UserCreate, UserUpdate, UserResponse, UserSummary
from app.schemas.auth import Token, TokenPayload
from app.schemas.service_provider import (
    ServiceProvider, ServiceProviderCreate, ServiceProviderUpdate, ServiceProviderSummary
)
from app.schemas.partner import Partner, PartnerCreate, PartnerUpdate, PartnerResponse
from app.schemas.case import Case, CaseCreate, CaseUpdate, CaseResponse, CaseDetail, CaseStatusChange
from app.schemas.claim import (
    Claim, ClaimCreate, ClaimUpdate, ClaimStats, ClaimTransitions, FileUploadResponse
)
from app.schemas.financial_step import FinancialStep, FinancialStepSave, StatementUploadResponse
from app.schemas.offboarding_step import (
    OffboardingStep, OffboardingDocument, DocumentExclusionUpdate, DocumentDelete,
    DocumentResponse, DocumentUploadResponse
)

# Export all schemas
__all__ = [
    'User', 'UserCreate', 'UserUpdate', 'UserResponse', 'UserSummary',
    'Token', 'TokenPayload',
    'ServiceProvider', 'ServiceProviderCreate', 'ServiceProviderUpdate', 'ServiceProviderSummary',
    'Partner', 'PartnerCreate', 'PartnerUpdate', 'PartnerResponse',
    'Case', 'CaseCreate', 'CaseUpdate', 'CaseResponse', 'CaseDetail', 'CaseStatusChange',
    'Claim', 'ClaimCreate', 'ClaimUpdate', 'ClaimStats', 'ClaimTransitions', 'FileUploadResponse',
    'FinancialStep', 'FinancialStepSave', 'StatementUploadResponse',
    'OffboardingStep', 'OffboardingDocument', 'DocumentExclusionUpdate', 'DocumentDelete',
    'DocumentResponse', 'DocumentUploadResponse',
]
