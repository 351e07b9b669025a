"""
Typed pricing rates and the input-sanitization boundary.

Configuration rows are converted here exactly once. Every numeric field is
parsed and checked; a missing, non-numeric, non-finite or negative value is
replaced by its documented fallback and the field name is recorded so the
substitution shows up in the fare breakdown. Pricing algorithms downstream
receive only finite values and never re-check them.
"""

import logging
import math
from typing import Any, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict

from ridefare.app.models.pricing_enums import BookingType

logger = logging.getLogger(__name__)

CHARGE_FALLBACK = 0.0
PLATFORM_FEE_FALLBACK = 10.0
SURGE_MULTIPLIER_FALLBACK = 1.0


def parse_finite(raw: Any) -> Optional[float]:
    """Return `raw` as a finite float, or None if it cannot be one."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


class _Sanitizer:
    """Collects fallback substitutions while a single row is converted."""

    def __init__(self, table: str, row_id: Optional[int] = None):
        self.table = table
        self.row_id = row_id
        self.fallbacks: List[str] = []

    def value(self, field: str, raw: Any, fallback: float = CHARGE_FALLBACK, minimum: float = 0.0) -> float:
        parsed = parse_finite(raw)
        if parsed is None or parsed < minimum:
            logger.warning(
                "Malformed %s.%s=%r (row %s), using fallback %s",
                self.table, field, raw, self.row_id, fallback
            )
            self.fallbacks.append(f"{self.table}.{field}")
            return fallback
        return parsed

    def optional(self, field: str, raw: Any) -> Optional[float]:
        """Like `value`, but an unset (NULL) field stays None without a fallback."""
        if raw is None:
            return None
        return self.value(field, raw)


class RateModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    fallbacks_applied: Tuple[str, ...] = ()


class FareMatrixRates(RateModel):
    booking_type: BookingType
    vehicle_type: str
    base_fare: float
    per_km_rate: float
    surge_multiplier: float
    platform_fee: float
    minimum_fare: Optional[float] = None

    @classmethod
    def from_row(cls, row) -> "FareMatrixRates":
        s = _Sanitizer("fare_matrix", row.id)
        return cls(
            booking_type=row.booking_type,
            vehicle_type=row.vehicle_type,
            base_fare=s.value("base_fare", row.base_fare),
            per_km_rate=s.value("per_km_rate", row.per_km_rate),
            surge_multiplier=s.value(
                "surge_multiplier", row.surge_multiplier,
                fallback=SURGE_MULTIPLIER_FALLBACK, minimum=1.0
            ),
            platform_fee=s.value("platform_fee", row.platform_fee, fallback=PLATFORM_FEE_FALLBACK),
            minimum_fare=s.optional("minimum_fare", row.minimum_fare),
            fallbacks_applied=tuple(s.fallbacks),
        )


class PlatformFee(RateModel):
    """Platform fee for a booking; falls back to the flat default."""
    amount: float

    @classmethod
    def from_matrix(cls, row) -> "PlatformFee":
        if row is None:
            return cls(amount=PLATFORM_FEE_FALLBACK, fallbacks_applied=("fare_matrix.platform_fee",))
        s = _Sanitizer("fare_matrix", row.id)
        amount = s.value("platform_fee", row.platform_fee, fallback=PLATFORM_FEE_FALLBACK)
        return cls(amount=amount, fallbacks_applied=tuple(s.fallbacks))


class RentalPackageRates(RateModel):
    package_name: str
    vehicle_type: str
    duration_hours: int
    base_fare: float
    km_included: float
    extra_km_rate: float
    extra_minute_rate: float

    @classmethod
    def from_row(cls, row) -> "RentalPackageRates":
        s = _Sanitizer("rental_fares", row.id)
        return cls(
            package_name=row.package_name,
            vehicle_type=row.vehicle_type,
            duration_hours=row.duration_hours,
            base_fare=s.value("base_fare", row.base_fare),
            km_included=s.value("km_included", row.km_included),
            extra_km_rate=s.value("extra_km_rate", row.extra_km_rate),
            extra_minute_rate=s.value("extra_minute_rate", row.extra_minute_rate),
            fallbacks_applied=tuple(s.fallbacks),
        )


class OutstationRates(RateModel):
    vehicle_type: str
    base_fare: float
    per_km_rate: float
    driver_allowance_per_day: float
    daily_km_limit: float

    @classmethod
    def from_row(cls, row) -> "OutstationRates":
        s = _Sanitizer("outstation_fares", row.id)
        return cls(
            vehicle_type=row.vehicle_type,
            base_fare=s.value("base_fare", row.base_fare),
            per_km_rate=s.value("per_km_rate", row.per_km_rate),
            driver_allowance_per_day=s.value("driver_allowance_per_day", row.driver_allowance_per_day),
            daily_km_limit=s.value("daily_km_limit", row.daily_km_limit),
            fallbacks_applied=tuple(s.fallbacks),
        )


class SlabTier(BaseModel):
    model_config = ConfigDict(frozen=True)

    limit_km: int
    fare: float


class SlabPackageRates(RateModel):
    vehicle_type: str
    tiers: Tuple[SlabTier, ...]
    extra_km_rate: float

    @classmethod
    def from_row(cls, row) -> "SlabPackageRates":
        s = _Sanitizer("outstation_packages", row.id)
        tiers = tuple(
            SlabTier(limit_km=limit, fare=s.value(f"slab_{limit}km", raw))
            for limit, raw in row.slab_fares()
        )
        return cls(
            vehicle_type=row.vehicle_type,
            tiers=tiers,
            extra_km_rate=s.value("extra_km_rate", row.extra_km_rate),
            fallbacks_applied=tuple(s.fallbacks),
        )

    def select_tier(self, distance_km: float) -> SlabTier:
        """Smallest tier whose limit covers the distance, else the largest tier."""
        for tier in self.tiers:
            if distance_km <= tier.limit_km:
                return tier
        return self.tiers[-1]


class AirportRates(RateModel):
    vehicle_type: str
    to_airport_fare: float
    from_airport_fare: float

    @classmethod
    def from_row(cls, row) -> "AirportRates":
        s = _Sanitizer("airport_fares", row.id)
        return cls(
            vehicle_type=row.vehicle_type,
            to_airport_fare=s.value("to_airport_fare", row.to_airport_fare),
            from_airport_fare=s.value("from_airport_fare", row.from_airport_fare),
            fallbacks_applied=tuple(s.fallbacks),
        )
