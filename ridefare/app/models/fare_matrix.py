"""
Fare Matrix database model.

Per booking type and vehicle type rate card.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean, Enum, Index
from sqlalchemy.sql import func
from ridefare.app.db.session import Base
from ridefare.app.models.pricing_enums import BookingType


class FareMatrix(Base):
    """
    Fare Matrix model.

    Several active rows may exist for the same (booking_type, vehicle_type);
    the most recently created one is authoritative.
    """
    __tablename__ = "fare_matrix"
    __table_args__ = (
        Index("ix_fare_matrix_lookup", "booking_type", "vehicle_type", "is_active"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Key
    booking_type = Column(Enum(BookingType), nullable=False)
    vehicle_type = Column(String(50), nullable=False)

    # Rates
    base_fare = Column(Float, nullable=True)
    per_km_rate = Column(Float, nullable=True)
    surge_multiplier = Column(Float, nullable=True, default=1.0)
    platform_fee = Column(Float, nullable=True)
    minimum_fare = Column(Float, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<FareMatrix(id={self.id}, {self.booking_type}/{self.vehicle_type}, base={self.base_fare})>"
