from app.db.base_class import Base
from app.db.models import (  # noqa: F401
    User,
    ServiceProvider,
    Partner,
    Case,
    InitialAssessment,
    Claim,
    FinancialStep,
    BankAccount,
    BankStatement,
    CreditCard,
    CardStatement,
    Loan,
    Mortgage,
    HirePurchaseAgreement,
    OffboardingStep,
    OffboardingDocument,
    IdCounter,
)

# All models are imported here for SQLAlchemy to discover them
