"""
Ride schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from ridefare.app.domain.geo.distance import Coordinate
from ridefare.app.models.pricing_enums import BookingType, RideStatus, TripType


class RideCreate(BaseModel):
    """Schema for booking a ride."""
    customer_id: int
    driver_id: Optional[int] = None
    booking_type: BookingType
    vehicle_type: str = Field(..., min_length=1, max_length=50)
    trip_type: Optional[TripType] = Field(None, description="Outstation only")
    selected_hours: Optional[int] = Field(None, gt=0, description="Rental only")
    scheduled_time: Optional[datetime] = None
    pickup_latitude: float = Field(..., ge=-90, le=90)
    pickup_longitude: float = Field(..., ge=-180, le=180)
    drop_latitude: float = Field(..., ge=-90, le=90)
    drop_longitude: float = Field(..., ge=-180, le=180)


class RideResponse(BaseModel):
    id: int
    customer_id: int
    driver_id: Optional[int]
    booking_type: BookingType
    vehicle_type: str
    trip_type: Optional[TripType]
    selected_hours: Optional[int]
    scheduled_time: Optional[datetime]
    pickup_latitude: float
    pickup_longitude: float
    drop_latitude: float
    drop_longitude: float
    status: RideStatus
    fare_amount: Optional[int]
    distance_km: Optional[float]
    duration_minutes: Optional[float]
    created_at: datetime
    started_at: Optional[datetime]
    completed_at: Optional[datetime]

    class Config:
        from_attributes = True


class RideStartRequest(BaseModel):
    """Driver taking the ride; keeps the booked driver when omitted."""
    driver_id: Optional[int] = None


class RideCompleteRequest(BaseModel):
    """
    Completion input. Distance defaults to the GPS trail and duration to
    the time since the ride started.
    """
    actual_distance_km: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    actual_duration_minutes: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    drop: Optional[Coordinate] = None
