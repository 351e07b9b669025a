"""
Fare calculation schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from ridefare.app.domain.geo.distance import Coordinate
from ridefare.app.domain.pricing.breakdown import TripFacts
from ridefare.app.models.pricing_enums import TripType


class FareCalculateRequest(BaseModel):
    """
    Quote a fare from trip facts without storing anything.

    `booking_type` is validated by the pricing engine so unsupported values
    surface as ERR_UNKNOWN_BOOKING_TYPE.
    """
    booking_type: str
    vehicle_type: str = Field(..., min_length=1, max_length=50)
    actual_distance_km: float = Field(..., ge=0, allow_inf_nan=False)
    actual_duration_minutes: float = Field(0.0, ge=0, allow_inf_nan=False)
    pickup: Coordinate
    drop: Coordinate
    scheduled_time: Optional[datetime] = None
    trip_type: TripType = TripType.ROUND_TRIP
    selected_hours: Optional[int] = Field(None, gt=0)

    def to_facts(self) -> TripFacts:
        return TripFacts(
            actual_distance_km=self.actual_distance_km,
            actual_duration_minutes=self.actual_duration_minutes,
            pickup=self.pickup,
            drop=self.drop,
            scheduled_time=self.scheduled_time,
            trip_type=self.trip_type,
            selected_hours=self.selected_hours,
        )
