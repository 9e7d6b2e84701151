from sqlalchemy import Column, String, Text, DateTime, Enum as SQLEnum, ForeignKey
from sqlalchemy.orm import relationship
from enum import Enum
from app.db.base_class import Base, generate_id, utcnow

class UserRole(str, Enum):
    USER = "USER"
    PARTNER = "PARTNER"
    ADMIN = "ADMIN"

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(Text, nullable=True)
    email = Column(Text, unique=True, nullable=False, index=True)
    # bcrypt hash; credential login is only possible when set
    password = Column(Text, nullable=True)
    role = Column(SQLEnum(UserRole, name="user_role"), nullable=False, default=UserRole.USER)
    partner_id = Column(String(36), ForeignKey("partners.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    partner = relationship("Partner", back_populates="users")
