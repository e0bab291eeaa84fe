from sqlalchemy import Column, Integer, Numeric, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from db import Base


class Area(Base):
    __tablename__ = "areas"

    id = Column(Integer, primary_key=True, index=True)
    zone_id = Column(Integer, ForeignKey("zones.id", ondelete="CASCADE"), nullable=False, index=True)
    area_number = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)  # used when structure_type = pond_zone_area

    # Organizer-controlled default; live availability also depends on active selections
    is_available = Column(Boolean, nullable=False, default=True)

    # Position on the pond layout image
    position_x = Column(Integer, nullable=False, default=0)
    position_y = Column(Integer, nullable=False, default=0)

    zone = relationship("Zone", back_populates="areas")
    selections = relationship("AreaSelection", back_populates="area", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("zone_id", "area_number", name="uq_area_number_per_zone"),
    )
