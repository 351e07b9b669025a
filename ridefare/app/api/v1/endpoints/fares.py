"""
Fare Quote API Endpoints.

Prices trip facts directly, without a stored ride.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ridefare.app.db.session import get_db
from ridefare.app.domain.pricing.breakdown import FareBreakdown
from ridefare.app.domain.pricing.engine import PricingEngine
from ridefare.app.domain.pricing.resolver import FareConfigResolver
from ridefare.app.schemas.fare import FareCalculateRequest
from ridefare.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/fares", tags=["Fares"])


@router.post("/calculate", response_model=FareBreakdown)
async def calculate_fare(
    request: FareCalculateRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Calculate an itemized fare.

    Errors:
    - 422 ERR_UNKNOWN_BOOKING_TYPE for unsupported booking types
    - 404 ERR_CONFIG_NOT_FOUND when no active configuration matches
    """
    engine = PricingEngine(FareConfigResolver(db))
    breakdown = await engine.compute_fare(request.booking_type, request.vehicle_type, request.to_facts())

    await log_event(
        db=db,
        action=AuditAction.FARE_CALCULATED,
        metadata={
            "booking_type": breakdown.booking_type.value,
            "vehicle_type": breakdown.vehicle_type,
            "actual_distance_km": request.actual_distance_km,
            "total_fare": breakdown.total_fare,
        }
    )

    return breakdown
