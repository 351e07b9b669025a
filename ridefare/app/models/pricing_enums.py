"""
Pricing and ride enumerations.
"""

import enum


class BookingType(str, enum.Enum):
    """Booking type enumeration. Selects the pricing algorithm."""
    REGULAR = "regular"  # Metered city ride
    RENTAL = "rental"  # Hourly package
    OUTSTATION = "outstation"  # Intercity, one-way or round trip
    AIRPORT = "airport"  # Flat directional fare


class TripType(str, enum.Enum):
    """Outstation trip type enumeration."""
    ONE_WAY = "one_way"
    ROUND_TRIP = "round_trip"


class RideStatus(str, enum.Enum):
    """Ride status enumeration."""
    REQUESTED = "REQUESTED"  # Booked, not started
    IN_PROGRESS = "IN_PROGRESS"  # Driver has started, GPS being recorded
    COMPLETED = "COMPLETED"  # Fare calculated and stored


class ZoneRole(str, enum.Enum):
    """Role of a geofence in deadhead detection."""
    INNER_RING = "INNER_RING"
    OUTER_RING = "OUTER_RING"
    OTHER = "OTHER"


class DeadheadStatus(str, enum.Enum):
    """Result of classifying a drop point against the ring zones."""
    NO_DEADHEAD = "NoDeadhead"  # Rings not configured
    WITHIN_INNER = "WithinInner"
    BEYOND_OUTER = "BeyondOuter"
    BETWEEN_RINGS = "BetweenRings"  # Surcharge zone


class UserType(str, enum.Enum):
    """Side of a trip completion used for reporting queries."""
    CUSTOMER = "customer"
    DRIVER = "driver"
