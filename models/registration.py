from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, Enum, Index, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from db import Base
import enum


class RegistrationStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


ACTIVE_STATUSES = (RegistrationStatus.PENDING, RegistrationStatus.CONFIRMED)

_ACTIVE_SQL = text("status IN ('pending', 'confirmed')")
_DRAFT_SQL = text("status = 'draft'")


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id", ondelete="CASCADE"), nullable=False, index=True)

    # Direct selection for pond_only / pond_zone tournaments
    pond_id = Column(Integer, ForeignKey("ponds.id", ondelete="SET NULL"), nullable=True)
    zone_id = Column(Integer, ForeignKey("zones.id", ondelete="SET NULL"), nullable=True)

    status = Column(
        Enum(RegistrationStatus, name="registration_status", values_callable=lambda obj: [e.value for e in obj]),
        default=RegistrationStatus.PENDING,
        nullable=False,
        index=True
    )
    total_payment = Column(Numeric(10, 2), nullable=False, default=0)  # always computed server-side
    payment_receipt = Column(String(255), nullable=True)
    bank_account_no = Column(String(50), nullable=True)
    bank_name = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    registered_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    confirmed_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="registrations")
    tournament = relationship("Tournament", back_populates="registrations")
    pond = relationship("Pond")
    zone = relationship("Zone")
    selections = relationship("AreaSelection", back_populates="registration", cascade="all, delete-orphan")
    catches = relationship("Catch", back_populates="registration", cascade="all, delete-orphan",
                           order_by="Catch.uploaded_at.desc()")

    __table_args__ = (
        # At most one active and at most one draft registration per (user, tournament)
        Index(
            "uq_registration_active_per_user", "user_id", "tournament_id",
            unique=True, postgresql_where=_ACTIVE_SQL, sqlite_where=_ACTIVE_SQL
        ),
        Index(
            "uq_registration_draft_per_user", "user_id", "tournament_id",
            unique=True, postgresql_where=_DRAFT_SQL, sqlite_where=_DRAFT_SQL
        ),
    )
