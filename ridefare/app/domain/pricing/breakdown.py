"""
Fare breakdown and trip facts.

`FareBreakdown` is the immutable result of every pricing algorithm. It is
only built through `build_breakdown`, which guards the component values and
derives `total_fare` from them.
"""

import math
from datetime import datetime
from typing import Any, Dict, Iterable, Optional
from pydantic import BaseModel, ConfigDict, Field

from ridefare.app.domain.geo.distance import Coordinate
from ridefare.app.domain.pricing.rates import CHARGE_FALLBACK, PLATFORM_FEE_FALLBACK
from ridefare.app.models.pricing_enums import BookingType, TripType

COMPONENT_FIELDS = (
    "base_fare",
    "distance_fare",
    "time_fare",
    "surge_charges",
    "deadhead_charges",
    "platform_fee",
    "gst_on_charges",
    "gst_on_platform_fee",
    "extra_km_charges",
    "driver_allowance",
)


class TripFacts(BaseModel):
    """Measured facts of a completed trip fed into pricing."""
    model_config = ConfigDict(frozen=True)

    actual_distance_km: float = Field(..., ge=0, allow_inf_nan=False)
    actual_duration_minutes: float = Field(0.0, ge=0, allow_inf_nan=False)
    pickup: Coordinate
    drop: Coordinate
    scheduled_time: Optional[datetime] = None
    trip_type: TripType = TripType.ROUND_TRIP  # Outstation only
    selected_hours: Optional[int] = Field(None, gt=0)  # Rental only


class FareBreakdown(BaseModel):
    """Itemized, tax-inclusive fare."""
    model_config = ConfigDict(frozen=True)

    booking_type: BookingType
    vehicle_type: str
    base_fare: float = Field(ge=0)
    distance_fare: float = Field(ge=0)
    time_fare: float = Field(ge=0)
    surge_charges: float = Field(ge=0)
    deadhead_charges: float = Field(ge=0)
    platform_fee: float = Field(ge=0)
    gst_on_charges: float = Field(ge=0)
    gst_on_platform_fee: float = Field(ge=0)
    extra_km_charges: float = Field(ge=0)
    driver_allowance: float = Field(ge=0)
    total_fare: int = Field(ge=0)
    details: Dict[str, Any] = Field(default_factory=dict)

    def components(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in COMPONENT_FIELDS}


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def gst_amounts(charges_subtotal: float, platform_fee: float, charges_rate: float, platform_rate: float):
    """GST on ride charges and, separately, on the platform fee."""
    return charges_subtotal * charges_rate, platform_fee * platform_rate


def build_breakdown(
    booking_type: BookingType,
    vehicle_type: str,
    details: Dict[str, Any],
    fallbacks: Iterable[str] = (),
    **components: float,
) -> FareBreakdown:
    """
    Assemble a FareBreakdown from computed components.

    Components not given are 0. A component that is not a finite,
    non-negative number is replaced (10 for the platform fee, 0 otherwise)
    and recorded under `details["fallbacks_applied"]`.
    """
    unknown = set(components) - set(COMPONENT_FIELDS)
    if unknown:
        raise TypeError(f"Unknown fare components: {sorted(unknown)}")

    applied = list(fallbacks)
    values: Dict[str, float] = {}
    for name in COMPONENT_FIELDS:
        value = components.get(name, 0.0)
        if not math.isfinite(value) or value < 0:
            value = PLATFORM_FEE_FALLBACK if name == "platform_fee" else CHARGE_FALLBACK
            applied.append(f"computed.{name}")
        values[name] = float(value)

    total_fare = round_half_up(sum(values.values()))

    return FareBreakdown(
        booking_type=booking_type,
        vehicle_type=vehicle_type,
        total_fare=total_fare,
        details={**details, "fallbacks_applied": applied},
        **values,
    )
