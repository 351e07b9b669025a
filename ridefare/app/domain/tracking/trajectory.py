"""
GPS trajectory distance.

Folds a ride's breadcrumb trail into the distance actually driven. Hops of
`max_hop_km` or more between consecutive samples are GPS jumps (500 m in a
5 second sampling window is 360 km/h) and are left out of the total.
"""

import logging
from typing import Iterable, Optional
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from ridefare.app.core.config import settings
from ridefare.app.domain.geo.distance import haversine_km
from ridefare.app.domain.tracking.location_store import read_points

logger = logging.getLogger(__name__)


class TrajectoryDistance(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance_km: float = 0.0
    points_used: int = 0
    discarded_hops: int = 0


def accumulate_trajectory(points: Iterable, max_hop_km: float = 0.5) -> TrajectoryDistance:
    """
    Sum the great-circle hops between consecutive points.

    Args:
        points: Ordered samples exposing `latitude` and `longitude`
        max_hop_km: Hops at or above this length are discarded

    Returns:
        TrajectoryDistance; zero distance and zero points for fewer than two points
    """
    points = list(points)
    if len(points) < 2:
        return TrajectoryDistance()

    total_km = 0.0
    discarded = 0
    for previous, current in zip(points, points[1:]):
        hop_km = haversine_km(previous.latitude, previous.longitude, current.latitude, current.longitude)
        if hop_km < max_hop_km:
            total_km += hop_km
        else:
            discarded += 1
            logger.debug("Discarding GPS jump of %.3f km", hop_km)

    return TrajectoryDistance(distance_km=total_km, points_used=len(points), discarded_hops=discarded)


async def compute_trajectory_distance(
    db: AsyncSession,
    ride_id: int,
    max_hop_km: Optional[float] = None,
) -> TrajectoryDistance:
    """Distance driven on a ride, from its stored location history."""
    points = await read_points(db, ride_id)
    result = accumulate_trajectory(points, settings.max_hop_km if max_hop_km is None else max_hop_km)
    if result.points_used == 0:
        logger.warning("Ride %s has fewer than 2 GPS points, distance is 0", ride_id)
    else:
        logger.info(
            "Ride %s GPS distance %.3f km from %d points (%d jumps discarded)",
            ride_id, result.distance_km, result.points_used, result.discarded_hops
        )
    return result
