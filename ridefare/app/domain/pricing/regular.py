"""
Regular (metered) ride pricing.

The first kilometers are bundled into the base fare; beyond that the
per-km rate applies. Deadhead and surge are added before GST.
"""

import logging

from ridefare.app.domain.geo.zones import ZoneSet
from ridefare.app.domain.pricing.breakdown import FareBreakdown, TripFacts, build_breakdown, gst_amounts
from ridefare.app.domain.pricing.deadhead import calculate_deadhead
from ridefare.app.domain.pricing.policy import PricingPolicy
from ridefare.app.domain.pricing.rates import FareMatrixRates
from ridefare.app.models.pricing_enums import BookingType

logger = logging.getLogger(__name__)


def calculate_regular_fare(
    vehicle_type: str,
    facts: TripFacts,
    rates: FareMatrixRates,
    zones: ZoneSet,
    policy: PricingPolicy,
) -> FareBreakdown:
    extra_km = max(0.0, facts.actual_distance_km - policy.base_km_included)
    distance_fare = extra_km * rates.per_km_rate

    deadhead = calculate_deadhead(facts.drop, rates.per_km_rate, zones, policy.deadhead_reference)

    subtotal_before_surge = rates.base_fare + distance_fare + deadhead.charge
    surge_charges = subtotal_before_surge * (rates.surge_multiplier - 1)

    charges_subtotal = subtotal_before_surge + surge_charges
    gst_on_charges, gst_on_platform_fee = gst_amounts(
        charges_subtotal, rates.platform_fee, policy.gst_rate_charges, policy.gst_rate_platform_fee
    )

    logger.debug(
        "Regular fare %s: extra_km=%.3f deadhead=%.2f (%s) surge=%.2f",
        vehicle_type, extra_km, deadhead.charge, deadhead.classification.status.value, surge_charges
    )

    return build_breakdown(
        BookingType.REGULAR,
        vehicle_type,
        details={
            "actual_distance_km": facts.actual_distance_km,
            "actual_duration_minutes": facts.actual_duration_minutes,
            "base_km_included": policy.base_km_included,
            "extra_km": extra_km,
            "per_km_rate": rates.per_km_rate,
            "surge_multiplier": rates.surge_multiplier,
            "platform_fee_flat": rates.platform_fee,
            "gst_rate_charges": policy.gst_rate_charges,
            "gst_rate_platform": policy.gst_rate_platform_fee,
            "zone_detected": deadhead.classification.zone_name,
            "deadhead_status": deadhead.classification.status.value,
            "deadhead_reason": deadhead.classification.reason,
            "is_inner_zone": deadhead.classification.is_inner_zone,
            "deadhead_distance_km": deadhead.distance_to_reference_km,
            "minimum_fare": rates.minimum_fare,
        },
        fallbacks=rates.fallbacks_applied,
        base_fare=rates.base_fare,
        distance_fare=distance_fare,
        deadhead_charges=deadhead.charge,
        surge_charges=surge_charges,
        platform_fee=rates.platform_fee,
        gst_on_charges=gst_on_charges,
        gst_on_platform_fee=gst_on_platform_fee,
    )
