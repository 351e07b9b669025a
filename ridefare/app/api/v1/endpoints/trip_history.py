"""
Trip History API Endpoints.

Customer trip history and spending; driver trip history and earnings.
"""

from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from ridefare.app.db.session import get_db
from ridefare.app.domain.billing.trip_completion_service import TripCompletionService
from ridefare.app.models.pricing_enums import BookingType, UserType
from ridefare.app.schemas.trip_completion import EarningsResponse, SpendingResponse, TripCompletionResponse

customer_router = APIRouter(prefix="/customers", tags=["Customer - Trip History"])
driver_router = APIRouter(prefix="/drivers", tags=["Driver - Trip History"])


async def _history(
    db: AsyncSession,
    user_id: int,
    user_type: UserType,
    booking_type: Optional[BookingType],
    start: Optional[datetime],
    end: Optional[datetime],
):
    if (start is None) != (end is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start and end must be given together"
        )

    if start is not None:
        completions = await TripCompletionService.list_by_date_range(db, user_id, user_type, start, end)
        if booking_type is not None:
            completions = [c for c in completions if c.booking_type == booking_type]
        return completions

    if booking_type is not None:
        return await TripCompletionService.list_by_booking_type(db, user_id, user_type, booking_type)

    if user_type == UserType.DRIVER:
        return await TripCompletionService.list_for_driver(db, user_id)
    return await TripCompletionService.list_for_customer(db, user_id)


@customer_router.get("/{customer_id}/trip-completions", response_model=List[TripCompletionResponse])
async def list_customer_trip_completions(
    customer_id: int = Path(..., description="Customer ID"),
    booking_type: Optional[BookingType] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Customer's completed rides, newest first."""
    return await _history(db, customer_id, UserType.CUSTOMER, booking_type, start, end)


@customer_router.get("/{customer_id}/spending", response_model=SpendingResponse)
async def read_customer_spending(
    customer_id: int = Path(..., description="Customer ID"),
    db: AsyncSession = Depends(get_db)
):
    total = await TripCompletionService.customer_total_spending(db, customer_id)
    return SpendingResponse(customer_id=customer_id, total_spending=total)


@driver_router.get("/{driver_id}/trip-completions", response_model=List[TripCompletionResponse])
async def list_driver_trip_completions(
    driver_id: int = Path(..., description="Driver ID"),
    booking_type: Optional[BookingType] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """Driver's completed rides, newest first."""
    return await _history(db, driver_id, UserType.DRIVER, booking_type, start, end)


@driver_router.get("/{driver_id}/earnings", response_model=EarningsResponse)
async def read_driver_earnings(
    driver_id: int = Path(..., description="Driver ID"),
    db: AsyncSession = Depends(get_db)
):
    total = await TripCompletionService.driver_total_earnings(db, driver_id)
    return EarningsResponse(driver_id=driver_id, total_earnings=total)
