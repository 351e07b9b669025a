"""
Trip Completion schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Any, Dict, Optional
from ridefare.app.models.pricing_enums import BookingType, TripType


class TripCompletionResponse(BaseModel):
    """Schema for displaying a stored fare."""
    id: int
    ride_id: int
    customer_id: int
    driver_id: Optional[int]
    booking_type: BookingType
    vehicle_type: str
    trip_type: Optional[TripType]
    rental_hours: Optional[int]
    scheduled_time: Optional[datetime]
    actual_distance_km: float
    actual_duration_minutes: float
    base_fare: float
    distance_fare: float
    time_fare: float
    surge_charges: float
    deadhead_charges: float
    platform_fee: float
    gst_on_charges: float
    gst_on_platform_fee: float
    extra_km_charges: float
    driver_allowance: float
    total_fare: int
    fare_breakdown: Dict[str, Any]
    completed_at: datetime

    class Config:
        from_attributes = True


class EarningsResponse(BaseModel):
    driver_id: int
    total_earnings: int


class SpendingResponse(BaseModel):
    customer_id: int
    total_spending: int
