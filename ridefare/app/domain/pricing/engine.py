"""
Pricing Engine.

Entry point for fare calculation. Validates the booking type, resolves the
rates the selected algorithm needs and hands them to the pure pricing
functions.

Flow:
1. Validate booking type
2. Resolve rates from the configuration store (sanitized on the way out)
3. Run the booking-type algorithm
4. Return the immutable FareBreakdown
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Union

from ridefare.app.core.exceptions import UnknownBookingTypeError
from ridefare.app.domain.pricing.airport import calculate_airport_fare
from ridefare.app.domain.pricing.breakdown import FareBreakdown, TripFacts
from ridefare.app.domain.pricing.outstation import (
    calculate_one_way_fare, calculate_round_trip_fare, calculate_slab_fare,
    outstation_days, uses_slab,
)
from ridefare.app.domain.pricing.policy import PricingPolicy
from ridefare.app.domain.pricing.regular import calculate_regular_fare
from ridefare.app.domain.pricing.rental import calculate_rental_fare
from ridefare.app.models.pricing_enums import BookingType, TripType

logger = logging.getLogger(__name__)


def parse_booking_type(booking_type: Union[str, BookingType]) -> BookingType:
    """
    Raises:
        UnknownBookingTypeError: If the value is not a supported booking type.
    """
    try:
        return BookingType(booking_type)
    except ValueError:
        raise UnknownBookingTypeError(booking_type)


class PricingEngine:

    def __init__(self, resolver, policy: Optional[PricingPolicy] = None):
        self.resolver = resolver
        self.policy = policy or PricingPolicy.from_settings()

    async def compute_fare(
        self,
        booking_type: Union[str, BookingType],
        vehicle_type: str,
        facts: TripFacts,
        now: Optional[datetime] = None,
    ) -> FareBreakdown:
        """
        Compute the itemized fare of a trip.

        Args:
            booking_type: regular, rental, outstation or airport
            vehicle_type: Vehicle class the rates are keyed by
            facts: Measured trip facts
            now: Reference time for the outstation day count (defaults to the wall clock)

        Raises:
            UnknownBookingTypeError: Unsupported booking type.
            ConfigurationNotFoundError: No active configuration for the key.
        """
        booking = parse_booking_type(booking_type)

        if booking == BookingType.REGULAR:
            breakdown = await self._regular(vehicle_type, facts)
        elif booking == BookingType.RENTAL:
            breakdown = await self._rental(vehicle_type, facts)
        elif booking == BookingType.OUTSTATION:
            breakdown = await self._outstation(vehicle_type, facts, now or datetime.now(timezone.utc))
        else:
            breakdown = await self._airport(vehicle_type, facts)

        fallbacks = breakdown.details.get("fallbacks_applied")
        if fallbacks:
            logger.warning("Fare for %s/%s used fallbacks: %s", booking.value, vehicle_type, fallbacks)
        logger.info(
            "Fare computed %s/%s distance=%.3fkm total=%d",
            booking.value, vehicle_type, facts.actual_distance_km, breakdown.total_fare
        )
        return breakdown

    async def _regular(self, vehicle_type: str, facts: TripFacts) -> FareBreakdown:
        rates = await self.resolver.fare_matrix(BookingType.REGULAR, vehicle_type)
        zones = await self.resolver.zones()
        return calculate_regular_fare(vehicle_type, facts, rates, zones, self.policy)

    async def _rental(self, vehicle_type: str, facts: TripFacts) -> FareBreakdown:
        hours = facts.selected_hours or self.policy.default_rental_hours
        package = await self.resolver.rental_package(vehicle_type, hours)
        return calculate_rental_fare(vehicle_type, facts, hours, package)

    async def _outstation(self, vehicle_type: str, facts: TripFacts, now: datetime) -> FareBreakdown:
        days = outstation_days(facts.scheduled_time, now)
        platform_fee = await self.resolver.platform_fee(BookingType.OUTSTATION, vehicle_type)

        if facts.trip_type == TripType.ONE_WAY:
            rates = await self.resolver.outstation_fare(vehicle_type)
            return calculate_one_way_fare(vehicle_type, facts, rates, platform_fee, days, self.policy)

        if uses_slab(days, facts.actual_distance_km, self.policy):
            slab = await self.resolver.slab_package(vehicle_type)
            if slab is not None:
                return calculate_slab_fare(vehicle_type, facts, slab, platform_fee, self.policy)

        rates = await self.resolver.outstation_fare(vehicle_type)
        return calculate_round_trip_fare(vehicle_type, facts, rates, platform_fee, days, self.policy)

    async def _airport(self, vehicle_type: str, facts: TripFacts) -> FareBreakdown:
        rates = await self.resolver.airport_fare(vehicle_type)
        return calculate_airport_fare(vehicle_type, facts, rates, self.policy)
