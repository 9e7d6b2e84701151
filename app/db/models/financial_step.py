from sqlalchemy import Column, Integer, Float, String, Text, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base_class import Base, generate_id, utcnow


def _owned(model: str, order_by: str):
    return relationship(
        model,
        back_populates="financial_step",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=order_by,
    )


def _step_fk():
    return Column(String(36), ForeignKey("financial_steps.id", ondelete="CASCADE"), nullable=False, index=True)


class FinancialStep(Base):
    __tablename__ = "financial_steps"

    id = Column(String(36), primary_key=True, default=generate_id)
    claim_id = Column(String(36), ForeignKey("claims.id", ondelete="CASCADE"), nullable=False, unique=True)
    credit_card_interest = Column(Text, nullable=True)
    financial_assessment = Column(Text, nullable=True)
    assessment_notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    claim = relationship("Claim", back_populates="financial_step")
    bank_accounts = _owned("BankAccount", "BankAccount.position")
    credit_cards = _owned("CreditCard", "CreditCard.position")
    loans = _owned("Loan", "Loan.position")
    mortgages = _owned("Mortgage", "Mortgage.position")
    hire_purchase_agreements = _owned("HirePurchaseAgreement", "HirePurchaseAgreement.position")


class BankAccount(Base):
    __tablename__ = "bank_accounts"

    id = Column(String(36), primary_key=True, default=generate_id)
    financial_step_id = _step_fk()
    position = Column(Integer, nullable=False, default=0)
    bank_name = Column(Text, nullable=True)
    account_number = Column(Text, nullable=True)
    account_type = Column(Text, nullable=True)
    last4 = Column(Text, nullable=True)
    balance = Column(Float, nullable=True)
    overdraft_limit = Column(Float, nullable=True)
    overdraft_used = Column(Float, nullable=True)
    status = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    financial_step = relationship("FinancialStep", back_populates="bank_accounts")
    bank_statements = relationship(
        "BankStatement", back_populates="bank_account",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="BankStatement.start_date",
    )


class BankStatement(Base):
    __tablename__ = "bank_statements"

    id = Column(String(36), primary_key=True, default=generate_id)
    bank_account_id = Column(String(36), ForeignKey("bank_accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    file_key = Column(Text, nullable=False)
    file_name = Column(Text, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    bank_account = relationship("BankAccount", back_populates="bank_statements")


class CreditCard(Base):
    __tablename__ = "credit_cards"

    id = Column(String(36), primary_key=True, default=generate_id)
    financial_step_id = _step_fk()
    position = Column(Integer, nullable=False, default=0)
    issuer = Column(Text, nullable=True)
    last4 = Column(Text, nullable=True)
    balance = Column(Float, nullable=True)
    limit = Column(Float, nullable=True)
    status = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    financial_step = relationship("FinancialStep", back_populates="credit_cards")
    card_statements = relationship(
        "CardStatement", back_populates="credit_card",
        cascade="all, delete-orphan", passive_deletes=True,
        order_by="CardStatement.start_date",
    )


class CardStatement(Base):
    __tablename__ = "card_statements"

    id = Column(String(36), primary_key=True, default=generate_id)
    credit_card_id = Column(String(36), ForeignKey("credit_cards.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    file_key = Column(Text, nullable=False)
    file_name = Column(Text, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    credit_card = relationship("CreditCard", back_populates="card_statements")


class Loan(Base):
    __tablename__ = "loans"

    id = Column(String(36), primary_key=True, default=generate_id)
    financial_step_id = _step_fk()
    position = Column(Integer, nullable=False, default=0)
    lender = Column(Text, nullable=True)
    balance = Column(Float, nullable=True)
    status = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    financial_step = relationship("FinancialStep", back_populates="loans")


class Mortgage(Base):
    __tablename__ = "mortgages"

    id = Column(String(36), primary_key=True, default=generate_id)
    financial_step_id = _step_fk()
    position = Column(Integer, nullable=False, default=0)
    lender = Column(Text, nullable=True)
    balance = Column(Float, nullable=True)
    monthly_payment = Column(Float, nullable=True)
    status = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    financial_step = relationship("FinancialStep", back_populates="mortgages")


class HirePurchaseAgreement(Base):
    __tablename__ = "hire_purchase_agreements"

    id = Column(String(36), primary_key=True, default=generate_id)
    financial_step_id = _step_fk()
    position = Column(Integer, nullable=False, default=0)
    lender = Column(Text, nullable=True)
    balance = Column(Float, nullable=True)
    monthly_payment = Column(Float, nullable=True)
    status = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    financial_step = relationship("FinancialStep", back_populates="hire_purchase_agreements")
