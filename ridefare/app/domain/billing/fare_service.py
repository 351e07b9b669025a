"""
Trip Fare Service (Domain Logic).

Completes a ride: measures it, prices it and records the fare.
Transactional and idempotent per ride.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ridefare.app.core.exceptions import InvalidRideStateError, ResourceNotFoundError
from ridefare.app.domain.billing.trip_completion_service import TripCompletionService
from ridefare.app.domain.geo.distance import Coordinate
from ridefare.app.domain.pricing.breakdown import TripFacts
from ridefare.app.domain.pricing.engine import PricingEngine
from ridefare.app.domain.pricing.resolver import FareConfigResolver
from ridefare.app.domain.tracking.trajectory import compute_trajectory_distance
from ridefare.app.models.pricing_enums import RideStatus, TripType
from ridefare.app.models.ride import Ride
from ridefare.app.models.trip_completion import TripCompletion
from ridefare.app.services.audit import log_event, AuditAction

logger = logging.getLogger(__name__)


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


async def get_ride(db: AsyncSession, ride_id: int) -> Ride:
    """
    Raises:
        ResourceNotFoundError: If the ride does not exist.
    """
    result = await db.execute(select(Ride).where(Ride.id == ride_id))
    ride = result.scalar_one_or_none()
    if ride is None:
        raise ResourceNotFoundError("Ride", ride_id)
    return ride


class TripFareService:

    @staticmethod
    async def complete_ride(
        db: AsyncSession,
        ride_id: int,
        actual_distance_km: Optional[float] = None,
        actual_duration_minutes: Optional[float] = None,
        drop: Optional[Coordinate] = None,
        now: Optional[datetime] = None,
    ) -> TripCompletion:
        """
        Price a finished ride and store its TripCompletion.

        Flow:
        1. Load ride (404 when missing)
        2. Idempotency check (existing TripCompletion is returned as is)
        3. Validate ride state (IN_PROGRESS)
        4. Measure: distance from GPS trail unless given, duration from start
        5. Compute fare
        6. Store TripCompletion and close the ride
        7. Audit

        Args:
            db: Database session
            ride_id: Ride to complete
            actual_distance_km: Measured distance; derived from GPS when omitted
            actual_duration_minutes: Measured duration; derived from started_at when omitted
            drop: Actual drop point when it differs from the booked one
            now: Completion time (defaults to the wall clock)

        Returns:
            The ride's TripCompletion
        """
        ride = await get_ride(db, ride_id)

        existing = await TripCompletionService.get_by_ride(db, ride_id)
        if existing is not None:
            logger.info("Ride %s already completed, returning stored fare", ride_id)
            return existing

        if ride.status != RideStatus.IN_PROGRESS:
            raise InvalidRideStateError(ride.id, ride.status.value, RideStatus.IN_PROGRESS.value)

        now = now or datetime.now(timezone.utc)

        if actual_distance_km is None:
            trajectory = await compute_trajectory_distance(db, ride_id)
            actual_distance_km = trajectory.distance_km

        if actual_duration_minutes is None:
            if ride.started_at is not None:
                elapsed = _as_utc(now) - _as_utc(ride.started_at)
                actual_duration_minutes = max(0.0, elapsed.total_seconds() / 60)
            else:
                actual_duration_minutes = 0.0

        if drop is not None:
            ride.drop_latitude = drop.latitude
            ride.drop_longitude = drop.longitude

        facts = TripFacts(
            actual_distance_km=actual_distance_km,
            actual_duration_minutes=actual_duration_minutes,
            pickup=Coordinate(latitude=ride.pickup_latitude, longitude=ride.pickup_longitude),
            drop=Coordinate(latitude=ride.drop_latitude, longitude=ride.drop_longitude),
            scheduled_time=ride.scheduled_time,
            trip_type=ride.trip_type or TripType.ROUND_TRIP,
            selected_hours=ride.selected_hours,
        )

        engine = PricingEngine(FareConfigResolver(db))
        breakdown = await engine.compute_fare(ride.booking_type, ride.vehicle_type, facts, now=now)

        completion = TripCompletion(
            ride_id=ride.id,
            customer_id=ride.customer_id,
            driver_id=ride.driver_id,
            booking_type=ride.booking_type,
            vehicle_type=ride.vehicle_type,
            trip_type=ride.trip_type,
            rental_hours=ride.selected_hours,
            scheduled_time=ride.scheduled_time,
            actual_distance_km=actual_distance_km,
            actual_duration_minutes=actual_duration_minutes,
            total_fare=breakdown.total_fare,
            fare_breakdown=breakdown.model_dump(mode="json"),
            completed_at=now,
            **breakdown.components(),
        )

        ride.status = RideStatus.COMPLETED
        ride.fare_amount = breakdown.total_fare
        ride.distance_km = actual_distance_km
        ride.duration_minutes = actual_duration_minutes
        ride.completed_at = now

        db.add(completion)
        try:
            await db.commit()
        except IntegrityError:
            # Completed concurrently; the first stored fare stands
            await db.rollback()
            existing = await TripCompletionService.get_by_ride(db, ride_id)
            if existing is None:
                raise
            return existing
        await db.refresh(completion)

        await log_event(
            db=db,
            action=AuditAction.TRIP_COMPLETED,
            actor_id=ride.driver_id,
            entity_type="ride",
            entity_id=ride.id,
            metadata={
                "trip_completion_id": completion.id,
                "booking_type": ride.booking_type.value,
                "total_fare": breakdown.total_fare,
                "actual_distance_km": actual_distance_km,
                "fallbacks_applied": breakdown.details.get("fallbacks_applied", []),
            }
        )

        logger.info("Ride %s completed, fare %d", ride.id, breakdown.total_fare)
        return completion
