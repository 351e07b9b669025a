"""
Location store.

Append-only access to the `trip_location_history` table.
"""

from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ridefare.app.models.trip_location import TripLocation


class LocationSample(BaseModel):
    """One GPS fix as reported by the device."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: Optional[float] = Field(None, ge=0)  # meters
    speed: Optional[float] = None  # m/s
    heading: Optional[float] = None  # degrees
    altitude: Optional[float] = None  # meters
    recorded_at: Optional[datetime] = None  # Defaults to the time of storage


async def append_point(
    db: AsyncSession,
    ride_id: int,
    driver_id: Optional[int],
    sample: LocationSample,
) -> TripLocation:
    """Store one GPS sample for a ride and commit it."""
    location = TripLocation(
        ride_id=ride_id,
        driver_id=driver_id,
        latitude=sample.latitude,
        longitude=sample.longitude,
        accuracy=sample.accuracy,
        speed=sample.speed,
        heading=sample.heading,
        altitude=sample.altitude,
        recorded_at=sample.recorded_at or datetime.now(timezone.utc),
    )

    db.add(location)
    await db.commit()
    await db.refresh(location)

    return location


async def read_points(db: AsyncSession, ride_id: int) -> List[TripLocation]:
    """All samples of a ride in recording order."""
    result = await db.execute(
        select(TripLocation).where(
            TripLocation.ride_id == ride_id
        ).order_by(TripLocation.recorded_at, TripLocation.id)
    )
    return list(result.scalars().all())
