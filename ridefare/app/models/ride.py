"""
Ride database model.

A booked ride and, once completed, its final fare, distance and duration.
"""

from sqlalchemy import Column, Integer, Float, String, DateTime, Enum
from sqlalchemy.sql import func
from ridefare.app.db.session import Base
from ridefare.app.models.pricing_enums import BookingType, TripType, RideStatus


class Ride(Base):
    """
    Ride model.
    """
    __tablename__ = "rides"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Parties
    customer_id = Column(Integer, nullable=False, index=True)
    driver_id = Column(Integer, nullable=True, index=True)

    # Booking
    booking_type = Column(Enum(BookingType), nullable=False)
    vehicle_type = Column(String(50), nullable=False)
    trip_type = Column(Enum(TripType), nullable=True)  # Outstation only
    selected_hours = Column(Integer, nullable=True)  # Rental only
    scheduled_time = Column(DateTime(timezone=True), nullable=True)

    # Endpoints
    pickup_latitude = Column(Float, nullable=False)
    pickup_longitude = Column(Float, nullable=False)
    drop_latitude = Column(Float, nullable=False)
    drop_longitude = Column(Float, nullable=False)

    # Status
    status = Column(Enum(RideStatus), default=RideStatus.REQUESTED, nullable=False, index=True)

    # Final figures (set on completion)
    fare_amount = Column(Integer, nullable=True)
    distance_km = Column(Float, nullable=True)
    duration_minutes = Column(Float, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Ride(id={self.id}, booking_type='{self.booking_type.value}', status='{self.status.value}')>"
