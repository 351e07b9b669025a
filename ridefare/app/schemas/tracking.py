"""
GPS tracking schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class LocationRecordResponse(BaseModel):
    """Response after recording location."""
    ride_id: int
    location_id: int
    recorded: bool


class TripLocationResponse(BaseModel):
    """GPS location response."""
    id: int
    latitude: float
    longitude: float
    accuracy: Optional[float]
    speed: Optional[float]
    heading: Optional[float]
    altitude: Optional[float]
    recorded_at: datetime

    class Config:
        from_attributes = True


class TripDistanceResponse(BaseModel):
    """Distance driven according to the GPS trail."""
    ride_id: int
    distance_km: float
    points_used: int
    discarded_hops: int
