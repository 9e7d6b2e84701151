from sqlalchemy import Column, String, Text, DateTime, Enum as SQLEnum, ForeignKey
from sqlalchemy.orm import relationship
from enum import Enum
from app.db.base_class import Base, generate_id, utcnow

class PartnerType(str, Enum):
    DIRECT = "DIRECT"
    BROKER = "BROKER"
    INSURER = "INSURER"
    BODYSHOP = "BODYSHOP"
    DEALERSHIP = "DEALERSHIP"
    FLEET = "FLEET"

# Outsourced service categories; each one links to a service provider
SERVICE_CATEGORIES = (
    "vehicle_recovery",
    "vehicle_storage",
    "replacement_hire",
    "vehicle_repairs",
    "independent_engineer",
    "vehicle_inspection",
)


def _provider_fk():
    return Column(String(36), ForeignKey("service_providers.id", ondelete="SET NULL"), nullable=True)


class Partner(Base):
    __tablename__ = "partners"

    id = Column(String(36), primary_key=True, default=generate_id)
    type = Column(SQLEnum(PartnerType, name="partner_type"), nullable=False, default=PartnerType.DIRECT)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    address = Column(Text, nullable=True)
    vehicle_recovery_id = _provider_fk()
    vehicle_storage_id = _provider_fk()
    replacement_hire_id = _provider_fk()
    vehicle_repairs_id = _provider_fk()
    independent_engineer_id = _provider_fk()
    vehicle_inspection_id = _provider_fk()
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    vehicle_recovery = relationship("ServiceProvider", foreign_keys=[vehicle_recovery_id])
    vehicle_storage = relationship("ServiceProvider", foreign_keys=[vehicle_storage_id])
    replacement_hire = relationship("ServiceProvider", foreign_keys=[replacement_hire_id])
    vehicle_repairs = relationship("ServiceProvider", foreign_keys=[vehicle_repairs_id])
    independent_engineer = relationship("ServiceProvider", foreign_keys=[independent_engineer_id])
    vehicle_inspection = relationship("ServiceProvider", foreign_keys=[vehicle_inspection_id])
    users = relationship("User", back_populates="partner", passive_deletes=True)
