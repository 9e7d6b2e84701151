from app.db.models.user import User, UserRole
from app.db.models.service_provider import ServiceProvider, ServiceProviderType
from app.db.models.partner import Partner, PartnerType, SERVICE_CATEGORIES
from app.db.models.case import Case, CaseStatus, CasePriority, InitialAssessment
from app.db.models.claim import Claim, ClaimStatus, ClaimType
from app.db.models.financial_step import (
    FinancialStep, BankAccount, BankStatement, CreditCard, CardStatement,
    Loan, Mortgage, HirePurchaseAgreement,
)
from app.db.models.offboarding_step import OffboardingStep, OffboardingDocument
from app.db.models.id_counter import IdCounter

# Export all models and enums
__all__ = [
    'User', 'UserRole',
    'ServiceProvider', 'ServiceProviderType',
    'Partner', 'PartnerType', 'SERVICE_CATEGORIES',
    'Case', 'CaseStatus', 'CasePriority', 'InitialAssessment',
    'Claim', 'ClaimStatus', 'ClaimType',
    'FinancialStep', 'BankAccount', 'BankStatement', 'CreditCard', 'CardStatement',
    'Loan', 'Mortgage', 'HirePurchaseAgreement',
    'OffboardingStep', 'OffboardingDocument',
    'IdCounter',
]
