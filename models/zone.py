from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from db import Base


class Zone(Base):
    __tablename__ = "zones"

    id = Column(Integer, primary_key=True, index=True)
    pond_id = Column(Integer, ForeignKey("ponds.id", ondelete="CASCADE"), nullable=False, index=True)
    zone_name = Column(String(150), nullable=False)
    zone_number = Column(Integer, nullable=False)
    color = Column(String(20), nullable=False, default="#3B82F6")
    price = Column(Numeric(10, 2), nullable=False, default=0)  # used when structure_type = pond_zone

    pond = relationship("Pond", back_populates="zones")
    areas = relationship("Area", back_populates="zone", cascade="all, delete-orphan", order_by="Area.area_number")

    __table_args__ = (
        UniqueConstraint("pond_id", "zone_number", name="uq_zone_number_per_pond"),
    )
