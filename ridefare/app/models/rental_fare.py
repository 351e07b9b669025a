"""
Rental Fare database model.

Hourly rental packages per vehicle type.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean
from sqlalchemy.sql import func
from ridefare.app.db.session import Base


class RentalFare(Base):
    """
    Rental package model.

    Keyed by (vehicle_type, duration_hours). When several active packages
    share a key the popular one wins, then the freshest.
    """
    __tablename__ = "rental_fares"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    vehicle_type = Column(String(50), nullable=False, index=True)
    duration_hours = Column(Integer, nullable=False)
    package_name = Column(String(100), nullable=False)

    base_fare = Column(Float, nullable=True)
    km_included = Column(Float, nullable=True)
    extra_km_rate = Column(Float, nullable=True)
    extra_minute_rate = Column(Float, nullable=True)

    is_popular = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<RentalFare(id={self.id}, {self.vehicle_type} {self.duration_hours}h, '{self.package_name}')>"
