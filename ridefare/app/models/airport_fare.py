"""
Airport Fare database model.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean
from sqlalchemy.sql import func
from ridefare.app.db.session import Base


class AirportFare(Base):
    """
    Airport transfer flat fares, one per direction.
    """
    __tablename__ = "airport_fares"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    vehicle_type = Column(String(50), nullable=False, index=True)
    to_airport_fare = Column(Float, nullable=True)  # City -> Airport
    from_airport_fare = Column(Float, nullable=True)  # Airport -> City

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<AirportFare(id={self.id}, vehicle={self.vehicle_type})>"
