"""
Rate Sanitization Tests.

Malformed configuration values are replaced once, at conversion, and the
substitution is reported in the breakdown.
"""

import math
from types import SimpleNamespace
import pytest
from pydantic import ValidationError

from ridefare.app.domain.geo.distance import Coordinate
from ridefare.app.domain.geo.zones import ZoneSet
from ridefare.app.domain.pricing.breakdown import COMPONENT_FIELDS, TripFacts, build_breakdown, round_half_up
from ridefare.app.domain.pricing.policy import PricingPolicy
from ridefare.app.domain.pricing.rates import (
    AirportRates, FareMatrixRates, PlatformFee, SlabPackageRates, parse_finite,
)
from ridefare.app.domain.pricing.regular import calculate_regular_fare
from ridefare.app.models.outstation_fare import SLAB_LIMITS_KM
from ridefare.app.models.pricing_enums import BookingType


def matrix_row(**overrides):
    values = dict(
        id=7, booking_type=BookingType.REGULAR, vehicle_type="sedan",
        base_fare=50, per_km_rate=10, surge_multiplier=1.0, platform_fee=10, minimum_fare=80,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.mark.parametrize("raw", [None, "abc", float("nan"), float("inf"), True])
def test_parse_finite_rejects(raw):
    assert parse_finite(raw) is None


def test_parse_finite_accepts_numeric_strings():
    assert parse_finite("12.5") == 12.5


def test_clean_row_has_no_fallbacks():
    rates = FareMatrixRates.from_row(matrix_row())
    assert rates.fallbacks_applied == ()
    assert rates.per_km_rate == 10


def test_non_finite_rate_falls_back_to_zero():
    rates = FareMatrixRates.from_row(matrix_row(per_km_rate=float("nan"), base_fare=float("inf")))
    assert rates.per_km_rate == 0
    assert rates.base_fare == 0
    assert set(rates.fallbacks_applied) == {"fare_matrix.per_km_rate", "fare_matrix.base_fare"}


def test_bad_platform_fee_falls_back_to_ten():
    rates = FareMatrixRates.from_row(matrix_row(platform_fee=-5))
    assert rates.platform_fee == 10
    assert rates.fallbacks_applied == ("fare_matrix.platform_fee",)


def test_surge_below_one_falls_back_to_one():
    rates = FareMatrixRates.from_row(matrix_row(surge_multiplier=0.5))
    assert rates.surge_multiplier == 1.0
    assert "fare_matrix.surge_multiplier" in rates.fallbacks_applied


def test_missing_matrix_row_gives_default_platform_fee():
    fee = PlatformFee.from_matrix(None)
    assert fee.amount == 10
    assert fee.fallbacks_applied == ("fare_matrix.platform_fee",)


def test_slab_tiers_are_sanitized_individually():
    row = SimpleNamespace(id=3, vehicle_type="sedan", extra_km_rate=None)
    fares = {limit: limit * 20 for limit in SLAB_LIMITS_KM}
    fares[60] = float("nan")
    row.slab_fares = lambda: iter(fares.items())

    slabs = SlabPackageRates.from_row(row)
    assert slabs.select_tier(55).fare == 0
    assert slabs.select_tier(45).fare == 1000
    assert set(slabs.fallbacks_applied) == {"outstation_packages.slab_60km", "outstation_packages.extra_km_rate"}


def test_airport_rates_sanitized():
    rates = AirportRates.from_row(SimpleNamespace(id=1, vehicle_type="sedan", to_airport_fare="x", from_airport_fare=700))
    assert rates.to_airport_fare == 0
    assert rates.from_airport_fare == 700


def test_fallbacks_surface_in_breakdown_details():
    rates = FareMatrixRates.from_row(matrix_row(per_km_rate=None))
    facts = TripFacts(
        actual_distance_km=10,
        pickup=Coordinate(latitude=12.74, longitude=77.82),
        drop=Coordinate(latitude=12.74, longitude=77.82),
    )
    fare = calculate_regular_fare("sedan", facts, rates, ZoneSet(), PricingPolicy())

    assert fare.distance_fare == 0
    assert fare.details["fallbacks_applied"] == ["fare_matrix.per_km_rate"]
    assert all(math.isfinite(value) for value in fare.components().values())


def test_build_breakdown_replaces_bad_components():
    fare = build_breakdown(
        BookingType.REGULAR, "sedan", details={},
        base_fare=100, distance_fare=float("nan"), platform_fee=-1,
    )
    assert fare.distance_fare == 0
    assert fare.platform_fee == 10
    assert fare.total_fare == 110
    assert fare.details["fallbacks_applied"] == ["computed.distance_fare", "computed.platform_fee"]


def test_build_breakdown_rejects_unknown_component():
    with pytest.raises(TypeError):
        build_breakdown(BookingType.REGULAR, "sedan", details={}, tip=5)


def test_total_is_sum_of_components_rounded_half_up():
    fare = build_breakdown(BookingType.AIRPORT, "sedan", details={}, base_fare=100.25, extra_km_charges=0.25)
    assert sorted(fare.components()) == sorted(COMPONENT_FIELDS)
    assert fare.total_fare == 101


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2
    assert round_half_up(0) == 0


def test_breakdown_is_immutable():
    fare = build_breakdown(BookingType.AIRPORT, "sedan", details={}, base_fare=600)
    with pytest.raises(ValidationError):
        fare.total_fare = 1


def test_unset_minimum_fare_is_not_a_fallback():
    rates = FareMatrixRates.from_row(matrix_row(minimum_fare=None))
    assert rates.minimum_fare is None
    assert rates.fallbacks_applied == ()


def test_malformed_minimum_fare_falls_back():
    rates = FareMatrixRates.from_row(matrix_row(minimum_fare=float("nan")))
    assert rates.minimum_fare == 0
    assert rates.fallbacks_applied == ("fare_matrix.minimum_fare",)
