from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from db import Base


class AreaSelection(Base):
    """Binds a registration to one area it claims"""
    __tablename__ = "area_selections"

    id = Column(Integer, primary_key=True, index=True)
    registration_id = Column(Integer, ForeignKey("registrations.id", ondelete="CASCADE"), nullable=False, index=True)
    area_id = Column(Integer, ForeignKey("areas.id", ondelete="CASCADE"), nullable=False, index=True)
    selected_at = Column(DateTime(timezone=True), server_default=func.now())

    registration = relationship("Registration", back_populates="selections")
    area = relationship("Area", back_populates="selections")

    __table_args__ = (
        UniqueConstraint("registration_id", "area_id", name="uq_selection_per_registration"),
    )
