"""
Ride API Endpoints.

Ride lifecycle: book, start, record GPS, complete.
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Path, Body
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from ridefare.app.core.exceptions import InvalidRideStateError, ResourceNotFoundError
from ridefare.app.db.session import get_db
from ridefare.app.domain.billing.fare_service import TripFareService, get_ride
from ridefare.app.domain.billing.trip_completion_service import TripCompletionService
from ridefare.app.domain.tracking.location_store import LocationSample, append_point, read_points
from ridefare.app.domain.tracking.trajectory import compute_trajectory_distance
from ridefare.app.models.pricing_enums import RideStatus
from ridefare.app.models.ride import Ride
from ridefare.app.schemas.ride import RideCreate, RideResponse, RideStartRequest, RideCompleteRequest
from ridefare.app.schemas.tracking import LocationRecordResponse, TripLocationResponse, TripDistanceResponse
from ridefare.app.schemas.trip_completion import TripCompletionResponse
from ridefare.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/rides", tags=["Rides"])


@router.post("", response_model=RideResponse)
async def create_ride(
    payload: RideCreate,
    db: AsyncSession = Depends(get_db)
):
    """Book a ride. The fare is computed on completion."""
    ride = Ride(**payload.model_dump(), status=RideStatus.REQUESTED)

    db.add(ride)
    await db.commit()
    await db.refresh(ride)

    await log_event(
        db=db,
        action=AuditAction.RIDE_CREATED,
        actor_id=ride.customer_id,
        entity_type="ride",
        entity_id=ride.id,
        metadata={"booking_type": ride.booking_type.value, "vehicle_type": ride.vehicle_type}
    )

    return ride


@router.get("/{ride_id}", response_model=RideResponse)
async def read_ride(
    ride_id: int = Path(..., description="Ride ID"),
    db: AsyncSession = Depends(get_db)
):
    return await get_ride(db, ride_id)


@router.post("/{ride_id}/start", response_model=RideResponse)
async def start_ride(
    ride_id: int = Path(..., description="Ride ID"),
    payload: Optional[RideStartRequest] = Body(None),
    db: AsyncSession = Depends(get_db)
):
    """
    Start a ride.

    Validates:
    - Ride is REQUESTED

    Actions:
    - Change status to IN_PROGRESS
    - Set started_at timestamp
    """
    payload = payload or RideStartRequest()
    ride = await get_ride(db, ride_id)

    if ride.status != RideStatus.REQUESTED:
        raise InvalidRideStateError(ride.id, ride.status.value, RideStatus.REQUESTED.value)

    if payload.driver_id is not None:
        ride.driver_id = payload.driver_id
    ride.status = RideStatus.IN_PROGRESS
    ride.started_at = datetime.now(timezone.utc)

    await db.commit()
    await db.refresh(ride)

    await log_event(
        db=db,
        action=AuditAction.RIDE_STARTED,
        actor_id=ride.driver_id,
        entity_type="ride",
        entity_id=ride.id,
    )

    return ride


@router.post("/{ride_id}/locations", response_model=LocationRecordResponse)
async def record_location(
    ride_id: int = Path(..., description="Ride ID"),
    sample: LocationSample = Body(...),
    db: AsyncSession = Depends(get_db)
):
    """
    Record a GPS sample for an IN_PROGRESS ride.

    Not audited; samples arrive every few seconds.
    """
    ride = await get_ride(db, ride_id)

    if ride.status != RideStatus.IN_PROGRESS:
        raise InvalidRideStateError(ride.id, ride.status.value, RideStatus.IN_PROGRESS.value)

    location = await append_point(db, ride.id, ride.driver_id, sample)

    return LocationRecordResponse(
        ride_id=ride.id,
        location_id=location.id,
        recorded=True
    )


@router.get("/{ride_id}/locations", response_model=List[TripLocationResponse])
async def list_locations(
    ride_id: int = Path(..., description="Ride ID"),
    db: AsyncSession = Depends(get_db)
):
    """GPS trail of a ride in recording order."""
    await get_ride(db, ride_id)
    return await read_points(db, ride_id)


@router.get("/{ride_id}/distance", response_model=TripDistanceResponse)
async def read_distance(
    ride_id: int = Path(..., description="Ride ID"),
    db: AsyncSession = Depends(get_db)
):
    """Distance driven so far according to the GPS trail."""
    await get_ride(db, ride_id)
    result = await compute_trajectory_distance(db, ride_id)
    return TripDistanceResponse(ride_id=ride_id, **result.model_dump())


@router.post("/{ride_id}/complete", response_model=TripCompletionResponse)
async def complete_ride(
    ride_id: int = Path(..., description="Ride ID"),
    payload: Optional[RideCompleteRequest] = Body(None),
    db: AsyncSession = Depends(get_db)
):
    """
    Complete a ride and store its fare.

    Repeating the call returns the fare stored the first time.
    """
    payload = payload or RideCompleteRequest()
    return await TripFareService.complete_ride(
        db,
        ride_id,
        actual_distance_km=payload.actual_distance_km,
        actual_duration_minutes=payload.actual_duration_minutes,
        drop=payload.drop,
    )


@router.get("/{ride_id}/completion", response_model=TripCompletionResponse)
async def read_completion(
    ride_id: int = Path(..., description="Ride ID"),
    db: AsyncSession = Depends(get_db)
):
    completion = await TripCompletionService.get_by_ride(db, ride_id)
    if completion is None:
        raise ResourceNotFoundError("Trip completion", ride_id)
    return completion
