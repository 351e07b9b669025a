"""
Zone database model.

Circular geofences used for deadhead detection.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean, Enum
from sqlalchemy.sql import func
from ridefare.app.db.session import Base
from ridefare.app.models.pricing_enums import ZoneRole


class Zone(Base):
    """
    Zone model.

    `role` may be left empty, in which case it is inferred from the name
    ("inner ring" / "outer ring") when the zone set is loaded.
    """
    __tablename__ = "zones"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    name = Column(String(100), nullable=False)
    role = Column(Enum(ZoneRole), nullable=True)

    center_latitude = Column(Float, nullable=False)
    center_longitude = Column(Float, nullable=False)
    radius_km = Column(Float, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Zone(id={self.id}, name='{self.name}', radius={self.radius_km}km)>"
