"""
Trip Completion queries.

Read side of the `trip_completions` table for customer history and driver
earnings. Lists are newest first.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import select, desc, func
from sqlalchemy.ext.asyncio import AsyncSession

from ridefare.app.models.pricing_enums import BookingType, UserType
from ridefare.app.models.trip_completion import TripCompletion


def _owner_column(user_type: UserType):
    if user_type == UserType.DRIVER:
        return TripCompletion.driver_id
    return TripCompletion.customer_id


class TripCompletionService:

    @staticmethod
    async def get_by_ride(db: AsyncSession, ride_id: int) -> Optional[TripCompletion]:
        result = await db.execute(
            select(TripCompletion).where(TripCompletion.ride_id == ride_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _list(db: AsyncSession, *criteria) -> List[TripCompletion]:
        query = select(TripCompletion).where(*criteria).order_by(
            desc(TripCompletion.completed_at), desc(TripCompletion.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def list_for_customer(db: AsyncSession, customer_id: int) -> List[TripCompletion]:
        return await TripCompletionService._list(db, TripCompletion.customer_id == customer_id)

    @staticmethod
    async def list_for_driver(db: AsyncSession, driver_id: int) -> List[TripCompletion]:
        return await TripCompletionService._list(db, TripCompletion.driver_id == driver_id)

    @staticmethod
    async def list_by_booking_type(
        db: AsyncSession,
        user_id: int,
        user_type: UserType,
        booking_type: BookingType,
    ) -> List[TripCompletion]:
        return await TripCompletionService._list(
            db,
            _owner_column(user_type) == user_id,
            TripCompletion.booking_type == booking_type,
        )

    @staticmethod
    async def list_by_date_range(
        db: AsyncSession,
        user_id: int,
        user_type: UserType,
        start: datetime,
        end: datetime,
    ) -> List[TripCompletion]:
        """Completions with `start <= completed_at <= end`."""
        return await TripCompletionService._list(
            db,
            _owner_column(user_type) == user_id,
            TripCompletion.completed_at >= start,
            TripCompletion.completed_at <= end,
        )

    @staticmethod
    async def driver_total_earnings(db: AsyncSession, driver_id: int) -> int:
        result = await db.execute(
            select(func.coalesce(func.sum(TripCompletion.total_fare), 0)).where(
                TripCompletion.driver_id == driver_id
            )
        )
        return int(result.scalar_one())

    @staticmethod
    async def customer_total_spending(db: AsyncSession, customer_id: int) -> int:
        result = await db.execute(
            select(func.coalesce(func.sum(TripCompletion.total_fare), 0)).where(
                TripCompletion.customer_id == customer_id
            )
        )
        return int(result.scalar_one())
