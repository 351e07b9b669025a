"""
Great-circle distance between coordinates.

Used for deadhead detection, airport direction and GPS trail distance.
"""

import math
from pydantic import BaseModel, ConfigDict, Field

# Radius of Earth in kilometers
EARTH_RADIUS_KM = 6371.0


class Coordinate(BaseModel):
    """WGS-84 position in degrees."""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


def haversine_distance_km(a: Coordinate, b: Coordinate) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Args:
        a, b: Coordinates in degrees

    Returns:
        Distance in kilometers
    """
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance on raw degree values, in kilometers."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2)**2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2)**2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c
