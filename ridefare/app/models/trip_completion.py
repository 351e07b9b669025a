"""
Trip Completion database model.

Stores the calculated fare of a completed ride.
"""

from sqlalchemy import Column, Integer, Float, String, ForeignKey, DateTime, Enum, JSON
from sqlalchemy.sql import func
from ridefare.app.db.session import Base
from ridefare.app.models.pricing_enums import BookingType, TripType


class TripCompletion(Base):
    """
    Trip Completion model.

    Immutable record of the fare breakdown computed when a ride ends.
    One per ride.
    """
    __tablename__ = "trip_completions"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Relationships
    ride_id = Column(Integer, ForeignKey('rides.id'), nullable=False, unique=True, index=True)
    customer_id = Column(Integer, nullable=False, index=True)
    driver_id = Column(Integer, nullable=True, index=True)

    # Booking
    booking_type = Column(Enum(BookingType), nullable=False, index=True)
    vehicle_type = Column(String(50), nullable=False)
    trip_type = Column(Enum(TripType), nullable=True)
    rental_hours = Column(Integer, nullable=True)
    scheduled_time = Column(DateTime(timezone=True), nullable=True)

    # Actuals
    actual_distance_km = Column(Float, nullable=False)
    actual_duration_minutes = Column(Float, nullable=False)

    # Itemized fare
    base_fare = Column(Float, nullable=False)
    distance_fare = Column(Float, nullable=False)
    time_fare = Column(Float, nullable=False)
    surge_charges = Column(Float, nullable=False)
    deadhead_charges = Column(Float, nullable=False)
    platform_fee = Column(Float, nullable=False)
    gst_on_charges = Column(Float, nullable=False)
    gst_on_platform_fee = Column(Float, nullable=False)
    extra_km_charges = Column(Float, nullable=False)
    driver_allowance = Column(Float, nullable=False)
    total_fare = Column(Integer, nullable=False)

    # Full breakdown including details bag
    fare_breakdown = Column(JSON, nullable=False)

    # Timestamps
    completed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<TripCompletion(id={self.id}, ride_id={self.ride_id}, total={self.total_fare})>"
