from sqlalchemy import Column, String, Text, Date, DateTime, Enum as SQLEnum, ForeignKey
from sqlalchemy.orm import relationship
from enum import Enum
from app.db.base_class import Base, generate_id, utcnow

class ClaimType(str, Enum):
    FAULT = "FAULT"
    NON_FAULT = "NON_FAULT"

class ClaimStatus(str, Enum):
    """Every stage a claim can sit in, intake board and handling pipeline alike."""
    PENDING_TRIAGE = "PENDING_TRIAGE"
    # Intake board
    PENDING_FINANCIAL = "PENDING_FINANCIAL"
    PENDING_LIVE_CLAIMS = "PENDING_LIVE_CLAIMS"
    PENDING_OS_DOCS = "PENDING_OS_DOCS"
    PENDING_PAYMENT_PACK_REVIEW = "PENDING_PAYMENT_PACK_REVIEW"
    PENDING_SENT_TO_TP = "PENDING_SENT_TO_TP"
    PENDING_SENT_TO_SOLS = "PENDING_SENT_TO_SOLS"
    PENDING_ISSUED = "PENDING_ISSUED"
    # Handling pipeline
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    IN_PROGRESS_SERVICES = "IN_PROGRESS_SERVICES"
    IN_PROGRESS_REPAIRS = "IN_PROGRESS_REPAIRS"
    PENDING_OFFBOARDING = "PENDING_OFFBOARDING"
    PENDING_OFFBOARDING_NONCOOPERATIVE = "PENDING_OFFBOARDING_NONCOOPERATIVE"
    PAYMENT_PACK_PREPARATION = "PAYMENT_PACK_PREPARATION"
    AWAITING_FINAL_PAYMENT = "AWAITING_FINAL_PAYMENT"
    CLOSED = "CLOSED"

class Claim(Base):
    __tablename__ = "claims"

    id = Column(String(36), primary_key=True, default=generate_id)
    type = Column(SQLEnum(ClaimType, name="claim_type"), nullable=False, default=ClaimType.NON_FAULT)
    status = Column(SQLEnum(ClaimStatus, name="claim_status"), nullable=False,
                    default=ClaimStatus.PENDING_TRIAGE, index=True)
    date_of_accident = Column(Date, nullable=False)

    # Client
    client_name = Column(Text, nullable=False)
    client_mobile = Column(Text, nullable=False)
    client_dob = Column(Date, nullable=False)
    client_post_code = Column(Text, nullable=False)

    # Additional driver
    additional_driver_name = Column(Text, nullable=True)
    additional_driver_mobile = Column(Text, nullable=True)
    additional_driver_dob = Column(Date, nullable=True)
    additional_driver_post_code = Column(Text, nullable=True)

    # Third party insurer
    tpi_insurer_name = Column(Text, nullable=True)
    tpi_insurer_contact = Column(Text, nullable=True)

    # Uploaded claim sheet
    uploaded_file_key = Column(Text, nullable=True)
    uploaded_file_name = Column(Text, nullable=True)

    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    partner_id = Column(String(36), ForeignKey("partners.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    financial_step = relationship(
        "FinancialStep", back_populates="claim", uselist=False,
        cascade="all, delete-orphan", passive_deletes=True,
    )
    offboarding_step = relationship(
        "OffboardingStep", back_populates="claim", uselist=False,
        cascade="all, delete-orphan", passive_deletes=True,
    )
