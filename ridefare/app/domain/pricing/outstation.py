"""
Outstation pricing.

Three methods, chosen by trip type, trip length in days and distance:

* one way: base fare + distance at twice the per-km rate (the return leg
  runs empty);
* round trip, same day, up to the slab ceiling: flat slab fare for the
  smallest covering tier plus extra km beyond that tier;
* round trip otherwise: per-km with a daily km allowance and a daily
  driver allowance. Under the allowance the full allowance is billed;
  over it the full distance is billed.

Platform fee and GST apply to all three.
"""

import math
from datetime import datetime, timezone
from typing import Optional

from ridefare.app.domain.pricing.breakdown import FareBreakdown, TripFacts, build_breakdown, gst_amounts
from ridefare.app.domain.pricing.policy import PricingPolicy
from ridefare.app.domain.pricing.rates import OutstationRates, PlatformFee, SlabPackageRates
from ridefare.app.models.pricing_enums import BookingType

SECONDS_PER_DAY = 24 * 60 * 60


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def outstation_days(scheduled_time: Optional[datetime], now: datetime) -> int:
    """Whole days between the scheduled start and now, at least one."""
    start = _as_utc(scheduled_time or now)
    elapsed_seconds = abs((_as_utc(now) - start).total_seconds())
    return max(1, math.ceil(elapsed_seconds / SECONDS_PER_DAY))


def uses_slab(days: int, distance_km: float, policy: PricingPolicy) -> bool:
    return days == 1 and distance_km <= policy.slab_max_distance_km


def _with_gst(charges_subtotal: float, platform_fee: PlatformFee, policy: PricingPolicy):
    return gst_amounts(
        charges_subtotal, platform_fee.amount, policy.gst_rate_charges, policy.gst_rate_platform_fee
    )


def calculate_one_way_fare(
    vehicle_type: str,
    facts: TripFacts,
    rates: OutstationRates,
    platform_fee: PlatformFee,
    days: int,
    policy: PricingPolicy,
) -> FareBreakdown:
    km_fare = facts.actual_distance_km * rates.per_km_rate * 2
    gst_on_charges, gst_on_platform_fee = _with_gst(rates.base_fare + km_fare, platform_fee, policy)

    return build_breakdown(
        BookingType.OUTSTATION,
        vehicle_type,
        details={
            "actual_distance_km": facts.actual_distance_km,
            "actual_duration_minutes": facts.actual_duration_minutes,
            "per_km_rate": rates.per_km_rate,
            "days_calculated": days,
            "within_allowance": True,
            "total_km_travelled": facts.actual_distance_km,
            "pricing_method": "one_way",
            "direction": "one_way",
            "platform_fee_flat": platform_fee.amount,
        },
        fallbacks=rates.fallbacks_applied + platform_fee.fallbacks_applied,
        base_fare=rates.base_fare,
        distance_fare=km_fare,
        platform_fee=platform_fee.amount,
        gst_on_charges=gst_on_charges,
        gst_on_platform_fee=gst_on_platform_fee,
    )


def calculate_slab_fare(
    vehicle_type: str,
    facts: TripFacts,
    slab: SlabPackageRates,
    platform_fee: PlatformFee,
    policy: PricingPolicy,
) -> FareBreakdown:
    tier = slab.select_tier(facts.actual_distance_km)
    extra_km = max(0.0, facts.actual_distance_km - tier.limit_km)
    extra_km_charges = extra_km * slab.extra_km_rate
    gst_on_charges, gst_on_platform_fee = _with_gst(tier.fare + extra_km_charges, platform_fee, policy)

    return build_breakdown(
        BookingType.OUTSTATION,
        vehicle_type,
        details={
            "actual_distance_km": facts.actual_distance_km,
            "actual_duration_minutes": facts.actual_duration_minutes,
            "per_km_rate": slab.extra_km_rate,
            "days_calculated": 1,
            "within_allowance": extra_km == 0,
            "package_name": f"{tier.limit_km}km Slab",
            "slab_selected_km": tier.limit_km,
            "extra_km": extra_km,
            "base_km_included": tier.limit_km,
            "total_km_travelled": facts.actual_distance_km,
            "pricing_method": "slab",
            "platform_fee_flat": platform_fee.amount,
        },
        fallbacks=slab.fallbacks_applied + platform_fee.fallbacks_applied,
        base_fare=tier.fare,
        extra_km_charges=extra_km_charges,
        platform_fee=platform_fee.amount,
        gst_on_charges=gst_on_charges,
        gst_on_platform_fee=gst_on_platform_fee,
    )


def calculate_round_trip_fare(
    vehicle_type: str,
    facts: TripFacts,
    rates: OutstationRates,
    platform_fee: PlatformFee,
    days: int,
    policy: PricingPolicy,
) -> FareBreakdown:
    km_allowance = rates.daily_km_limit * days
    driver_allowance = rates.driver_allowance_per_day * days

    within_allowance = facts.actual_distance_km <= km_allowance
    if within_allowance:
        # Full allowance is billed even when under-used
        km_fare = rates.daily_km_limit * days * rates.per_km_rate
    else:
        km_fare = facts.actual_distance_km * rates.per_km_rate

    gst_on_charges, gst_on_platform_fee = _with_gst(
        rates.base_fare + km_fare + driver_allowance, platform_fee, policy
    )

    return build_breakdown(
        BookingType.OUTSTATION,
        vehicle_type,
        details={
            "actual_distance_km": facts.actual_distance_km,
            "actual_duration_minutes": facts.actual_duration_minutes,
            "per_km_rate": rates.per_km_rate,
            "days_calculated": days,
            "daily_km_limit": rates.daily_km_limit,
            "within_allowance": within_allowance,
            "total_km_travelled": facts.actual_distance_km,
            "km_allowance": km_allowance,
            "extra_km": max(0.0, facts.actual_distance_km - km_allowance),
            "pricing_method": "per_km",
            "platform_fee_flat": platform_fee.amount,
        },
        fallbacks=rates.fallbacks_applied + platform_fee.fallbacks_applied,
        base_fare=rates.base_fare,
        distance_fare=km_fare,
        driver_allowance=driver_allowance,
        platform_fee=platform_fee.amount,
        gst_on_charges=gst_on_charges,
        gst_on_platform_fee=gst_on_platform_fee,
    )
