from typing import List, Optional
from enum import Enum
from datetime import date, datetime
from app.schemas.base import CamelModel, OptionalNumber, OptionalText

# Collection items; an ``id`` naming an existing row updates that row in place

class BankAccountIn(CamelModel):
    id: OptionalText = None
    bank_name: OptionalText = None
    account_number: OptionalText = None
    account_type: OptionalText = None
    last4: OptionalText = None
    balance: OptionalNumber = None
    overdraft_limit: OptionalNumber = None
    overdraft_used: OptionalNumber = None
    status: OptionalText = None

class CreditCardIn(CamelModel):
    id: OptionalText = None
    issuer: OptionalText = None
    last4: OptionalText = None
    balance: OptionalNumber = None
    limit: OptionalNumber = None
    status: OptionalText = None

class LoanIn(CamelModel):
    id: OptionalText = None
    lender: OptionalText = None
    balance: OptionalNumber = None
    status: OptionalText = None

class MortgageIn(CamelModel):
    id: OptionalText = None
    lender: OptionalText = None
    balance: OptionalNumber = None
    monthly_payment: OptionalNumber = None
    status: OptionalText = None

class HirePurchaseAgreementIn(MortgageIn):
    pass

class FinancialStepSave(CamelModel):
    """
    Collections left out of the payload are not touched; an empty list (or
    null) clears one.
    """
    credit_card_interest: OptionalText = None
    financial_assessment: OptionalText = None
    assessment_notes: OptionalText = None
    bank_accounts: Optional[List[BankAccountIn]] = None
    credit_cards: Optional[List[CreditCardIn]] = None
    loans: Optional[List[LoanIn]] = None
    mortgages: Optional[List[MortgageIn]] = None
    hire_purchase_agreements: Optional[List[HirePurchaseAgreementIn]] = None

class Statement(CamelModel):
    id: str
    start_date: date
    end_date: date
    file_key: str
    file_name: str
    uploaded_at: datetime

class BankStatement(Statement):
    bank_account_id: str

class CardStatement(Statement):
    credit_card_id: str

class BankAccount(BankAccountIn):
    id: str
    bank_statements: List[BankStatement] = []

class CreditCard(CreditCardIn):
    id: str
    card_statements: List[CardStatement] = []

class Loan(LoanIn):
    id: str

class Mortgage(MortgageIn):
    id: str

class HirePurchaseAgreement(HirePurchaseAgreementIn):
    id: str

class FinancialStep(CamelModel):
    id: str
    claim_id: str
    credit_card_interest: Optional[str] = None
    financial_assessment: Optional[str] = None
    assessment_notes: Optional[str] = None
    bank_accounts: List[BankAccount] = []
    credit_cards: List[CreditCard] = []
    loans: List[Loan] = []
    mortgages: List[Mortgage] = []
    hire_purchase_agreements: List[HirePurchaseAgreement] = []
    created_at: datetime
    updated_at: datetime

class StatementUploadResponse(CamelModel):
    success: bool = True
    statement: Statement
    file_key: str
    file_name: str

class StatementKind(str, Enum):
    CARD = "card"
    BANK = "bank"
