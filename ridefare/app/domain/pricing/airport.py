"""
Airport transfer pricing.

Flat fare by direction. The endpoint nearer the city center is taken as
the city side: a pickup strictly nearer the center than the drop means the
ride goes to the airport.
"""

from ridefare.app.domain.geo.distance import haversine_distance_km
from ridefare.app.domain.pricing.breakdown import FareBreakdown, TripFacts, build_breakdown
from ridefare.app.domain.pricing.policy import PricingPolicy
from ridefare.app.domain.pricing.rates import AirportRates
from ridefare.app.models.pricing_enums import BookingType

TO_AIRPORT = "City to Airport"
FROM_AIRPORT = "Airport to City"


def calculate_airport_fare(
    vehicle_type: str,
    facts: TripFacts,
    rates: AirportRates,
    policy: PricingPolicy,
) -> FareBreakdown:
    pickup_to_center = haversine_distance_km(facts.pickup, policy.city_center)
    drop_to_center = haversine_distance_km(facts.drop, policy.city_center)

    to_airport = pickup_to_center < drop_to_center
    fare = rates.to_airport_fare if to_airport else rates.from_airport_fare

    return build_breakdown(
        BookingType.AIRPORT,
        vehicle_type,
        details={
            "actual_distance_km": haversine_distance_km(facts.pickup, facts.drop),
            "actual_duration_minutes": 0,
            "per_km_rate": 0,
            "direction": TO_AIRPORT if to_airport else FROM_AIRPORT,
            "pickup_to_center_km": pickup_to_center,
            "drop_to_center_km": drop_to_center,
        },
        fallbacks=rates.fallbacks_applied,
        base_fare=fare,
    )
