from sqlalchemy import Column, Integer, String, Text, Date, Time, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from db import Base
import enum


def enum_values(enum_cls):
    return [e.value for e in enum_cls]


class StructureType(str, enum.Enum):
    """Which spatial unit is sold: a whole pond, a zone, or individual areas"""
    POND_ONLY = "pond_only"
    POND_ZONE = "pond_zone"
    POND_ZONE_AREA = "pond_zone_area"


class TournamentStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# No registration or catch may change once a tournament reaches one of these
FROZEN_STATUSES = (TournamentStatus.COMPLETED, TournamentStatus.CANCELLED)


class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(Integer, primary_key=True, index=True)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    location = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)

    # Fixed at creation: changing it would orphan the prices of the other levels
    structure_type = Column(
        Enum(StructureType, name="structure_type", values_callable=enum_values),
        default=StructureType.POND_ZONE_AREA,
        nullable=False
    )
    status = Column(
        Enum(TournamentStatus, name="tournament_status", values_callable=enum_values),
        default=TournamentStatus.DRAFT,
        nullable=False
    )

    # Schedule
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    tournament_start_time = Column(Time, nullable=True)
    tournament_end_time = Column(Time, nullable=True)
    registration_start_date = Column(Date, nullable=True)
    registration_end_date = Column(Date, nullable=True)

    # Public, unguessable links
    registration_link = Column(String(64), unique=True, index=True, nullable=False)
    leaderboard_link = Column(String(64), unique=True, index=True, nullable=False)

    banner_image = Column(String(255), nullable=True)
    payment_details_image = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    organizer = relationship("User", back_populates="organized_tournaments")
    ponds = relationship("Pond", back_populates="tournament", cascade="all, delete-orphan", order_by="Pond.id")
    registrations = relationship("Registration", back_populates="tournament", cascade="all, delete-orphan")

    @property
    def is_frozen(self) -> bool:
        return self.status in FROZEN_STATUSES
