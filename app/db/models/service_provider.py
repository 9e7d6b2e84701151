from sqlalchemy import Column, String, Text, DateTime, Enum as SQLEnum
from enum import Enum
from app.db.base_class import Base, generate_id, utcnow

class ServiceProviderType(str, Enum):
    INTERNAL = "INTERNAL"
    EXTERNAL = "EXTERNAL"

class ServiceProvider(Base):
    __tablename__ = "service_providers"

    id = Column(String(36), primary_key=True, default=generate_id)
    type = Column(SQLEnum(ServiceProviderType, name="service_provider_type"), nullable=False,
                  default=ServiceProviderType.EXTERNAL)
    name = Column(Text, nullable=False, index=True)
    email = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
