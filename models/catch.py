from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from db import Base
import enum


class ApprovalStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Catch(Base):
    __tablename__ = "catches"

    id = Column(Integer, primary_key=True, index=True)
    registration_id = Column(Integer, ForeignKey("registrations.id", ondelete="CASCADE"), nullable=False, index=True)
    catch_image = Column(String(255), nullable=False)
    weight = Column(Numeric(10, 3), nullable=False)  # kg
    species = Column(String(100), nullable=True)

    approval_status = Column(
        Enum(ApprovalStatus, name="approval_status", values_callable=lambda obj: [e.value for e in obj]),
        default=ApprovalStatus.PENDING,
        nullable=False,
        index=True
    )
    rejection_reason = Column(Text, nullable=True)

    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())
    approved_at = Column(DateTime(timezone=True), nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    registration = relationship("Registration", back_populates="catches")
