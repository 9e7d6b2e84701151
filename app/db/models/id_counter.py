from sqlalchemy import Column, Integer, String
from app.db.base_class import Base

class IdCounter(Base):
    """Named monotonic counter used to hand out human-readable numbers."""
    __tablename__ = "id_counters"

    name = Column(String(64), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
