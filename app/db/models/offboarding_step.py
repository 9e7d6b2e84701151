from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base_class import Base, generate_id, utcnow

class OffboardingStep(Base):
    __tablename__ = "offboarding_steps"

    id = Column(String(36), primary_key=True, default=generate_id)
    claim_id = Column(String(36), ForeignKey("claims.id", ondelete="CASCADE"), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    claim = relationship("Claim", back_populates="offboarding_step")
    documents = relationship(
        "OffboardingDocument",
        back_populates="offboarding_step",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OffboardingDocument.created_at",
    )

class OffboardingDocument(Base):
    __tablename__ = "offboarding_documents"
    __table_args__ = (
        UniqueConstraint("offboarding_step_id", "document_type", name="uq_offboarding_document_type"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    offboarding_step_id = Column(String(36), ForeignKey("offboarding_steps.id", ondelete="CASCADE"),
                                 nullable=False, index=True)
    document_type = Column(Text, nullable=False)
    file_key = Column(Text, nullable=True, index=True)
    file_name = Column(Text, nullable=True)
    uploaded_at = Column(DateTime(timezone=True), nullable=True)
    is_excluded = Column(Boolean, nullable=False, default=False)
    excluded_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    offboarding_step = relationship("OffboardingStep", back_populates="documents")
