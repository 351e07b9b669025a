"""
Geofence zones and deadhead classification.

Ring roles are resolved once when the zone set is loaded; classification
then only compares distances against the two ring radii.
"""

from typing import Iterable, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from ridefare.app.domain.geo.distance import Coordinate, haversine_distance_km
from ridefare.app.models.pricing_enums import ZoneRole, DeadheadStatus

ZONES_UNCONFIGURED = "ZonesUnconfigured"

_NAME_MARKERS = (
    ("inner ring", ZoneRole.INNER_RING),
    ("outer ring", ZoneRole.OUTER_RING),
)


def resolve_zone_role(name: str, explicit_role: Optional[ZoneRole] = None) -> ZoneRole:
    """Explicit role wins; otherwise look for a ring marker in the zone name."""
    if explicit_role is not None:
        return ZoneRole(explicit_role)
    lowered = (name or "").lower()
    for marker, role in _NAME_MARKERS:
        if marker in lowered:
            return role
    return ZoneRole.OTHER


class ZoneDefinition(BaseModel):
    """A circular geofence with its resolved role."""
    model_config = ConfigDict(frozen=True)

    name: str
    role: ZoneRole
    center: Coordinate
    radius_km: float = Field(..., ge=0, allow_inf_nan=False)

    @classmethod
    def from_row(cls, zone) -> "ZoneDefinition":
        """Build from a `Zone` ORM row."""
        return cls(
            name=zone.name,
            role=resolve_zone_role(zone.name, zone.role),
            center=Coordinate(latitude=zone.center_latitude, longitude=zone.center_longitude),
            radius_km=zone.radius_km,
        )


class ZoneSet(BaseModel):
    """Active zones grouped by role."""
    model_config = ConfigDict(frozen=True)

    inner: Optional[ZoneDefinition] = None
    outer: Optional[ZoneDefinition] = None
    others: List[ZoneDefinition] = Field(default_factory=list)

    @classmethod
    def from_zones(cls, zones: Iterable[ZoneDefinition]) -> "ZoneSet":
        """Group zones by role. The first zone seen for each ring is used."""
        inner = outer = None
        others = []
        for zone in zones:
            if zone.role == ZoneRole.INNER_RING and inner is None:
                inner = zone
            elif zone.role == ZoneRole.OUTER_RING and outer is None:
                outer = zone
            else:
                others.append(zone)
        return cls(inner=inner, outer=outer, others=others)

    @property
    def rings_configured(self) -> bool:
        return self.inner is not None and self.outer is not None


class ZoneClassification(BaseModel):
    """Where a point sits relative to the ring zones."""
    model_config = ConfigDict(frozen=True)

    status: DeadheadStatus
    zone_name: str
    reason: Optional[str] = None

    @property
    def is_inner_zone(self) -> bool:
        return self.status == DeadheadStatus.WITHIN_INNER

    @property
    def applies_surcharge(self) -> bool:
        return self.status == DeadheadStatus.BETWEEN_RINGS


def classify(point: Coordinate, zones: Union[ZoneSet, Iterable[ZoneDefinition]]) -> ZoneClassification:
    """
    Classify a point against the inner and outer ring zones.

    The two containment tests are independent: the inner test uses the inner
    zone's center and the outer test uses the outer zone's own center.
    """
    if not isinstance(zones, ZoneSet):
        zones = ZoneSet.from_zones(zones)

    if not zones.rings_configured:
        return ZoneClassification(
            status=DeadheadStatus.NO_DEADHEAD,
            zone_name="Unknown",
            reason=ZONES_UNCONFIGURED,
        )

    inner, outer = zones.inner, zones.outer

    if haversine_distance_km(point, inner.center) <= inner.radius_km:
        return ZoneClassification(status=DeadheadStatus.WITHIN_INNER, zone_name=inner.name)

    if haversine_distance_km(point, outer.center) > outer.radius_km:
        return ZoneClassification(status=DeadheadStatus.BEYOND_OUTER, zone_name="Beyond Outer Zone")

    return ZoneClassification(status=DeadheadStatus.BETWEEN_RINGS, zone_name="Between Inner and Outer Ring")
