from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from db import Base


class Pond(Base):
    __tablename__ = "ponds"

    id = Column(Integer, primary_key=True, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id", ondelete="CASCADE"), nullable=False, index=True)
    pond_name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    layout_image = Column(String(255), nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)  # used when structure_type = pond_only

    tournament = relationship("Tournament", back_populates="ponds")
    zones = relationship("Zone", back_populates="pond", cascade="all, delete-orphan", order_by="Zone.zone_number")
