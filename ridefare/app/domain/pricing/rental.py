"""
Rental package pricing.

Flat package price with charges for kilometers and minutes beyond the
package allowance. No surge, platform fee or GST.
"""

from ridefare.app.domain.pricing.breakdown import FareBreakdown, TripFacts, build_breakdown
from ridefare.app.domain.pricing.rates import RentalPackageRates
from ridefare.app.models.pricing_enums import BookingType


def calculate_rental_fare(
    vehicle_type: str,
    facts: TripFacts,
    selected_hours: int,
    package: RentalPackageRates,
) -> FareBreakdown:
    extra_km = max(0.0, facts.actual_distance_km - package.km_included)
    extra_km_charges = extra_km * package.extra_km_rate

    package_minutes = selected_hours * 60
    extra_minutes = max(0.0, facts.actual_duration_minutes - package_minutes)
    extra_time_charges = extra_minutes * package.extra_minute_rate

    within_allowance = extra_km_charges == 0 and extra_time_charges == 0

    return build_breakdown(
        BookingType.RENTAL,
        vehicle_type,
        details={
            "actual_distance_km": facts.actual_distance_km,
            "actual_duration_minutes": facts.actual_duration_minutes,
            "package_name": package.package_name,
            "selected_hours": selected_hours,
            "base_km_included": package.km_included,
            "package_minutes": package_minutes,
            "extra_km": extra_km,
            "extra_minutes": extra_minutes,
            "per_km_rate": package.extra_km_rate,
            "per_minute_rate": package.extra_minute_rate,
            "within_allowance": within_allowance,
        },
        fallbacks=package.fallbacks_applied,
        base_fare=package.base_fare,
        extra_km_charges=extra_km_charges,
        time_fare=extra_time_charges,
    )
