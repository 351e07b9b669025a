"""
Deadhead charge for regular rides.

A drop-off between the inner and outer ring leaves the driver with an
unpaid return leg; half of the distance back to the reference point is
billed at the per-km rate.
"""

from pydantic import BaseModel, ConfigDict

from ridefare.app.domain.geo.distance import Coordinate, haversine_distance_km
from ridefare.app.domain.geo.zones import ZoneSet, ZoneClassification, classify


class DeadheadResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    charge: float
    classification: ZoneClassification
    distance_to_reference_km: float = 0.0


def calculate_deadhead(
    drop: Coordinate,
    per_km_rate: float,
    zones: ZoneSet,
    reference_point: Coordinate,
) -> DeadheadResult:
    classification = classify(drop, zones)
    if not classification.applies_surcharge:
        return DeadheadResult(charge=0.0, classification=classification)

    distance_to_reference = haversine_distance_km(drop, reference_point)
    return DeadheadResult(
        charge=(distance_to_reference / 2) * per_km_rate,
        classification=classification,
        distance_to_reference_km=distance_to_reference,
    )
