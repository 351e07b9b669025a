"""
GPS Trajectory and Tracking Session Tests.
"""

import asyncio
import math
from datetime import datetime, timedelta, timezone
import pytest

from ridefare.app.domain.geo.distance import Coordinate, EARTH_RADIUS_KM
from ridefare.app.domain.tracking.location_store import LocationSample, append_point, read_points
from ridefare.app.domain.tracking.session import start_tracking
from ridefare.app.domain.tracking.trajectory import accumulate_trajectory, compute_trajectory_distance
from ridefare.app.models.pricing_enums import BookingType, RideStatus
from ridefare.app.models.ride import Ride

START = Coordinate(latitude=12.7401984, longitude=77.824)


def north_of(point, km: float) -> Coordinate:
    return Coordinate(latitude=point.latitude + math.degrees(km / EARTH_RADIUS_KM), longitude=point.longitude)


async def create_ride(db_session) -> Ride:
    ride = Ride(
        customer_id=1, driver_id=2, booking_type=BookingType.REGULAR, vehicle_type="sedan",
        pickup_latitude=START.latitude, pickup_longitude=START.longitude,
        drop_latitude=START.latitude, drop_longitude=START.longitude,
        status=RideStatus.IN_PROGRESS,
    )
    db_session.add(ride)
    await db_session.commit()
    await db_session.refresh(ride)
    return ride


# Accumulator

def test_jump_is_discarded():
    p1 = north_of(START, 0.3)
    p2 = north_of(p1, 0.6)
    result = accumulate_trajectory([START, p1, p2])

    assert result.distance_km == pytest.approx(0.3)
    assert result.points_used == 3
    assert result.discarded_hops == 1


def test_hop_at_threshold_is_discarded():
    result = accumulate_trajectory([START, north_of(START, 0.5)])
    assert result.distance_km == 0
    assert result.discarded_hops == 1


def test_short_hops_accumulate():
    points = [START]
    for _ in range(10):
        points.append(north_of(points[-1], 0.1))
    result = accumulate_trajectory(points)
    assert result.distance_km == pytest.approx(1.0)
    assert result.points_used == 11


@pytest.mark.parametrize("points", [[], [START]])
def test_fewer_than_two_points(points):
    result = accumulate_trajectory(points)
    assert result.distance_km == 0
    assert result.points_used == 0


def test_custom_hop_limit():
    result = accumulate_trajectory([START, north_of(START, 0.6)], max_hop_km=1.0)
    assert result.distance_km == pytest.approx(0.6)


# Location store

@pytest.mark.asyncio
async def test_points_read_in_recording_order(db_session):
    ride = await create_ride(db_session)
    t0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    p1 = north_of(START, 0.2)
    p2 = north_of(p1, 0.2)

    # Stored out of order
    for point, offset in [(p2, 10), (START, 0), (p1, 5)]:
        await append_point(
            db_session, ride.id, ride.driver_id,
            LocationSample(latitude=point.latitude, longitude=point.longitude, recorded_at=t0 + timedelta(seconds=offset)),
        )

    points = await read_points(db_session, ride.id)
    assert [p.latitude for p in points] == pytest.approx([START.latitude, p1.latitude, p2.latitude])

    result = await compute_trajectory_distance(db_session, ride.id)
    assert result.distance_km == pytest.approx(0.4)
    assert result.points_used == 3


@pytest.mark.asyncio
async def test_distance_of_ride_without_points(db_session):
    ride = await create_ride(db_session)
    result = await compute_trajectory_distance(db_session, ride.id)
    assert result.distance_km == 0
    assert result.points_used == 0


# Tracking session

@pytest.mark.asyncio
async def test_tracking_session_records_until_stopped(db_session, session_factory):
    ride = await create_ride(db_session)
    trail = [START]

    async def location_source():
        trail.append(north_of(trail[-1], 0.05))
        return LocationSample(latitude=trail[-1].latitude, longitude=trail[-1].longitude)

    session = start_tracking(ride.id, ride.driver_id, location_source, session_factory, interval_seconds=0.01)
    assert session.is_tracking

    await asyncio.sleep(0.1)
    recorded = await session.stop()

    assert not session.is_tracking
    assert recorded >= 1
    assert recorded == session.points_recorded

    points = await read_points(db_session, ride.id)
    assert len(points) == recorded

    # No samples after stop
    await asyncio.sleep(0.05)
    assert len(await read_points(db_session, ride.id)) == recorded


@pytest.mark.asyncio
async def test_tracking_session_survives_failed_sample(db_session, session_factory):
    ride = await create_ride(db_session)
    calls = {"count": 0}

    async def flaky_source():
        calls["count"] += 1
        if calls["count"] == 1:
            raise RuntimeError("GPS unavailable")
        return LocationSample(latitude=START.latitude, longitude=START.longitude)

    session = start_tracking(ride.id, ride.driver_id, flaky_source, session_factory, interval_seconds=0.01)
    await asyncio.sleep(0.1)
    await session.stop()

    assert calls["count"] >= 2
    assert session.points_recorded == calls["count"] - 1


@pytest.mark.asyncio
async def test_sessions_are_independent(db_session, session_factory):
    first = await create_ride(db_session)
    second = await create_ride(db_session)

    async def source():
        return LocationSample(latitude=START.latitude, longitude=START.longitude)

    a = start_tracking(first.id, 2, source, session_factory, interval_seconds=0.01)
    b = start_tracking(second.id, 2, source, session_factory, interval_seconds=0.01)
    await asyncio.sleep(0.05)
    await a.stop()

    assert not a.is_tracking
    assert b.is_tracking
    await b.stop()


@pytest.mark.asyncio
async def test_stop_cancels_hung_location_source(db_session, session_factory):
    ride = await create_ride(db_session)
    never = asyncio.Event()

    async def hung_source():
        await never.wait()

    session = start_tracking(ride.id, ride.driver_id, hung_source, session_factory, interval_seconds=0.01)
    await asyncio.sleep(0.02)

    recorded = await asyncio.wait_for(session.stop(timeout_seconds=0.05), timeout=1)
    assert recorded == 0
    assert not session.is_tracking


@pytest.mark.asyncio
async def test_explicit_zero_hop_limit_is_honoured(db_session):
    ride = await create_ride(db_session)
    t0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    for offset, point in enumerate([START, north_of(START, 0.1)]):
        await append_point(
            db_session, ride.id, ride.driver_id,
            LocationSample(latitude=point.latitude, longitude=point.longitude, recorded_at=t0 + timedelta(seconds=offset)),
        )

    result = await compute_trajectory_distance(db_session, ride.id, max_hop_km=0)
    assert result.distance_km == 0
    assert result.discarded_hops == 1

    default = await compute_trajectory_distance(db_session, ride.id)
    assert default.distance_km == pytest.approx(0.1)
