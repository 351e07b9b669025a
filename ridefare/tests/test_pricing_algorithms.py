"""
Pricing Algorithm Tests.

Regular, rental, outstation and airport pricing on resolved rates, without
a database.
"""

import math
from datetime import datetime, timedelta, timezone
import pytest

from ridefare.app.domain.geo.distance import Coordinate, EARTH_RADIUS_KM, haversine_distance_km
from ridefare.app.domain.geo.zones import ZoneDefinition, ZoneSet
from ridefare.app.domain.pricing.airport import FROM_AIRPORT, TO_AIRPORT, calculate_airport_fare
from ridefare.app.domain.pricing.breakdown import TripFacts
from ridefare.app.domain.pricing.outstation import (
    calculate_one_way_fare, calculate_round_trip_fare, calculate_slab_fare, outstation_days, uses_slab,
)
from ridefare.app.domain.pricing.policy import PricingPolicy
from ridefare.app.domain.pricing.rates import (
    AirportRates, FareMatrixRates, OutstationRates, PlatformFee, RentalPackageRates, SlabPackageRates, SlabTier,
)
from ridefare.app.domain.pricing.regular import calculate_regular_fare
from ridefare.app.domain.pricing.rental import calculate_rental_fare
from ridefare.app.models.outstation_fare import SLAB_LIMITS_KM
from ridefare.app.models.pricing_enums import BookingType, DeadheadStatus, TripType, ZoneRole

POLICY = PricingPolicy()
CENTER = POLICY.city_center
AIRPORT = Coordinate(latitude=12.95, longitude=77.67)


def north_of(point: Coordinate, km: float) -> Coordinate:
    return Coordinate(latitude=point.latitude + math.degrees(km / EARTH_RADIUS_KM), longitude=point.longitude)


def facts(distance_km: float, minutes: float = 0, drop: Coordinate = CENTER, **kwargs) -> TripFacts:
    return TripFacts(
        actual_distance_km=distance_km,
        actual_duration_minutes=minutes,
        pickup=kwargs.pop("pickup", CENTER),
        drop=drop,
        **kwargs,
    )


def regular_rates(surge: float = 1.0, platform_fee: float = 10) -> FareMatrixRates:
    return FareMatrixRates(
        booking_type=BookingType.REGULAR, vehicle_type="sedan",
        base_fare=50, per_km_rate=10, surge_multiplier=surge, platform_fee=platform_fee, minimum_fare=80,
    )


RINGS = ZoneSet.from_zones([
    ZoneDefinition(name="Hosur Inner Ring", role=ZoneRole.INNER_RING, center=CENTER, radius_km=5),
    ZoneDefinition(name="Hosur Outer Ring", role=ZoneRole.OUTER_RING, center=CENTER, radius_km=15),
])


# Regular

def test_regular_total_matches_components():
    fare = calculate_regular_fare("sedan", facts(10), regular_rates(), RINGS, POLICY)

    assert fare.base_fare == 50
    assert fare.distance_fare == pytest.approx(60)  # 6 km beyond the bundled 4
    assert fare.deadhead_charges == 0
    assert fare.surge_charges == 0
    assert fare.gst_on_charges == pytest.approx(0.05 * 110)
    assert fare.gst_on_platform_fee == pytest.approx(0.18 * 10)
    assert fare.total_fare == round(110 + 10 + 5.5 + 1.8)
    assert fare.total_fare == 127


def test_regular_within_bundled_km_has_no_distance_fare():
    fare = calculate_regular_fare("sedan", facts(4), regular_rates(), RINGS, POLICY)
    assert fare.distance_fare == 0
    assert fare.details["extra_km"] == 0


def test_regular_surge_applies_to_base_distance_and_deadhead():
    fare = calculate_regular_fare("sedan", facts(10), regular_rates(surge=1.5), RINGS, POLICY)
    assert fare.surge_charges == pytest.approx(55)
    assert fare.gst_on_charges == pytest.approx(0.05 * 165)
    assert fare.total_fare == 185  # 165 + 10 + 8.25 + 1.8


def test_regular_deadhead_between_rings():
    drop = north_of(CENTER, 10)
    fare = calculate_regular_fare("sedan", facts(12, drop=drop), regular_rates(), RINGS, POLICY)

    expected_deadhead = haversine_distance_km(drop, POLICY.deadhead_reference) / 2 * 10
    assert fare.deadhead_charges == pytest.approx(expected_deadhead)
    assert fare.details["deadhead_status"] == DeadheadStatus.BETWEEN_RINGS.value
    assert fare.details["zone_detected"] == "Between Inner and Outer Ring"
    assert fare.details["is_inner_zone"] is False
    assert fare.gst_on_charges == pytest.approx(0.05 * (50 + 80 + expected_deadhead))


def test_regular_no_deadhead_beyond_outer_ring():
    fare = calculate_regular_fare("sedan", facts(30, drop=north_of(CENTER, 25)), regular_rates(), RINGS, POLICY)
    assert fare.deadhead_charges == 0
    assert fare.details["deadhead_status"] == DeadheadStatus.BEYOND_OUTER.value


def test_regular_without_rings_reports_unconfigured():
    fare = calculate_regular_fare("sedan", facts(10, drop=north_of(CENTER, 10)), regular_rates(), ZoneSet(), POLICY)
    assert fare.deadhead_charges == 0
    assert fare.details["zone_detected"] == "Unknown"
    assert fare.details["deadhead_reason"] == "ZonesUnconfigured"


def test_minimum_fare_is_informational():
    fare = calculate_regular_fare("sedan", facts(1), regular_rates(), RINGS, POLICY)
    assert fare.details["minimum_fare"] == 80
    assert fare.total_fare == 64  # 50 + 10 + 2.5 + 1.8, below the minimum


def test_regular_details_carry_rates():
    fare = calculate_regular_fare("sedan", facts(10), regular_rates(), RINGS, POLICY)
    assert fare.details["base_km_included"] == 4
    assert fare.details["per_km_rate"] == 10
    assert fare.details["platform_fee_flat"] == 10
    assert fare.details["fallbacks_applied"] == []


# Rental

RENTAL_PACKAGE = RentalPackageRates(
    package_name="4 Hours / 40 km", vehicle_type="sedan", duration_hours=4,
    base_fare=800, km_included=40, extra_km_rate=12, extra_minute_rate=2,
)


def test_rental_at_exact_allowance():
    fare = calculate_rental_fare("sedan", facts(40, minutes=240), 4, RENTAL_PACKAGE)
    assert fare.details["within_allowance"] is True
    assert fare.total_fare == round(800)


def test_rental_extra_km_and_minutes():
    fare = calculate_rental_fare("sedan", facts(50, minutes=270), 4, RENTAL_PACKAGE)
    assert fare.extra_km_charges == pytest.approx(120)
    assert fare.time_fare == pytest.approx(60)
    assert fare.distance_fare == 0
    assert fare.details["within_allowance"] is False
    assert fare.details["extra_km"] == pytest.approx(10)
    assert fare.details["extra_minutes"] == pytest.approx(30)
    assert fare.total_fare == 980


def test_rental_has_no_platform_fee_or_gst():
    fare = calculate_rental_fare("sedan", facts(50, minutes=270), 4, RENTAL_PACKAGE)
    assert fare.platform_fee == 0
    assert fare.gst_on_charges == 0
    assert fare.gst_on_platform_fee == 0
    assert fare.surge_charges == 0


# Outstation

OUTSTATION_RATES = OutstationRates(
    vehicle_type="sedan", base_fare=300, per_km_rate=11, driver_allowance_per_day=300, daily_km_limit=250,
)
SLABS = SlabPackageRates(
    vehicle_type="sedan",
    tiers=tuple(SlabTier(limit_km=limit, fare=limit * 20) for limit in SLAB_LIMITS_KM),
    extra_km_rate=15,
)
PLATFORM_FEE = PlatformFee(amount=10)


def test_outstation_days():
    now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert outstation_days(None, now) == 1
    assert outstation_days(now, now) == 1
    assert outstation_days(now - timedelta(hours=30), now) == 2
    assert outstation_days(now - timedelta(hours=48), now) == 2
    assert outstation_days(now + timedelta(hours=30), now) == 2


def test_outstation_days_naive_scheduled_time_is_utc():
    now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert outstation_days(datetime(2026, 2, 27, 12, 0), now) == 2


def test_slab_applies_same_day_up_to_ceiling():
    assert uses_slab(1, 150, POLICY)
    assert not uses_slab(1, 150.1, POLICY)
    assert not uses_slab(2, 50, POLICY)


def test_slab_selects_smallest_covering_tier():
    fare = calculate_slab_fare("sedan", facts(55), SLABS, PLATFORM_FEE, POLICY)
    assert fare.details["slab_selected_km"] == 60
    assert fare.details["extra_km"] == 0
    assert fare.base_fare == 1200
    assert fare.extra_km_charges == 0
    assert fare.total_fare == 1272  # 1200 + 10 + 60 + 1.8


def test_slab_tier_boundary_is_inclusive():
    assert SLABS.select_tier(60).limit_km == 60
    assert SLABS.select_tier(60.01).limit_km == 70


def test_slab_beyond_largest_tier_charges_extra_km():
    fare = calculate_slab_fare("sedan", facts(160), SLABS, PLATFORM_FEE, POLICY)
    assert fare.details["slab_selected_km"] == 150
    assert fare.details["extra_km"] == pytest.approx(10)
    assert fare.extra_km_charges == pytest.approx(150)


def test_one_way_doubles_km_fare():
    rates = OutstationRates(
        vehicle_type="sedan", base_fare=100, per_km_rate=10, driver_allowance_per_day=0, daily_km_limit=0,
    )
    fare = calculate_one_way_fare("sedan", facts(20, trip_type=TripType.ONE_WAY), rates, PLATFORM_FEE, 1, POLICY)
    assert fare.distance_fare == pytest.approx(400)
    assert fare.base_fare == 100
    assert fare.gst_on_charges == pytest.approx(0.05 * 500)
    assert fare.details["pricing_method"] == "one_way"


def test_round_trip_within_allowance_bills_full_allowance():
    fare = calculate_round_trip_fare("sedan", facts(200), OUTSTATION_RATES, PLATFORM_FEE, 2, POLICY)
    assert fare.details["within_allowance"] is True
    assert fare.details["km_allowance"] == 500
    assert fare.distance_fare == pytest.approx(500 * 11)
    assert fare.driver_allowance == 600
    assert fare.gst_on_charges == pytest.approx(0.05 * (300 + 5500 + 600))
    assert fare.total_fare == 6732  # 6400 + 10 + 320 + 1.8


def test_round_trip_over_allowance_bills_full_distance():
    fare = calculate_round_trip_fare("sedan", facts(300), OUTSTATION_RATES, PLATFORM_FEE, 1, POLICY)
    assert fare.details["within_allowance"] is False
    assert fare.distance_fare == pytest.approx(300 * 11)
    assert fare.details["extra_km"] == pytest.approx(50)
    assert fare.driver_allowance == 300


# Airport

AIRPORT_RATES = AirportRates(vehicle_type="sedan", to_airport_fare=600, from_airport_fare=700)


def test_airport_city_to_airport():
    fare = calculate_airport_fare("sedan", facts(35, pickup=CENTER, drop=AIRPORT), AIRPORT_RATES, POLICY)
    assert fare.details["direction"] == TO_AIRPORT
    assert fare.base_fare == 600
    assert fare.total_fare == 600


def test_airport_airport_to_city():
    fare = calculate_airport_fare("sedan", facts(35, pickup=AIRPORT, drop=CENTER), AIRPORT_RATES, POLICY)
    assert fare.details["direction"] == FROM_AIRPORT
    assert fare.total_fare == 700


def test_airport_tie_is_airport_to_city():
    fare = calculate_airport_fare("sedan", facts(0, pickup=AIRPORT, drop=AIRPORT), AIRPORT_RATES, POLICY)
    assert fare.details["direction"] == FROM_AIRPORT


def test_airport_has_no_gst_or_platform_fee():
    fare = calculate_airport_fare("sedan", facts(35, pickup=CENTER, drop=AIRPORT), AIRPORT_RATES, POLICY)
    assert fare.platform_fee == 0
    assert fare.gst_on_charges == 0
    assert fare.gst_on_platform_fee == 0
