"""
Fare Configuration Resolver.

Looks up the applicable rate configuration from the configuration store.
Every lookup filters active rows by key and takes the freshest one
(latest `created_at`, then highest id). Rows leave this module already
sanitized as typed rate models.
"""

import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from ridefare.app.core.exceptions import ConfigurationNotFoundError
from ridefare.app.domain.geo.zones import ZoneDefinition, ZoneSet
from ridefare.app.domain.pricing.rates import (
    AirportRates, FareMatrixRates, OutstationRates, PlatformFee,
    RentalPackageRates, SlabPackageRates,
)
from ridefare.app.models.airport_fare import AirportFare
from ridefare.app.models.fare_matrix import FareMatrix
from ridefare.app.models.outstation_fare import OutstationFare, OutstationPackage
from ridefare.app.models.pricing_enums import BookingType
from ridefare.app.models.rental_fare import RentalFare
from ridefare.app.models.zone import Zone
from ridefare.app.services.cache import ConfigCache

logger = logging.getLogger(__name__)


class FareConfigResolver:

    def __init__(self, db: AsyncSession, use_cache: bool = True):
        self.db = db
        self.use_cache = use_cache

    async def _freshest(self, model, *criteria):
        query = select(model).where(
            model.is_active == True,
            *criteria
        ).order_by(desc(model.created_at), desc(model.id)).limit(1)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def _fare_matrix_row(self, booking_type: BookingType, vehicle_type: str) -> Optional[FareMatrix]:
        return await self._freshest(
            FareMatrix,
            FareMatrix.booking_type == booking_type,
            FareMatrix.vehicle_type == vehicle_type,
        )

    async def fare_matrix(self, booking_type: BookingType, vehicle_type: str) -> FareMatrixRates:
        """
        Resolve the rate card for a booking type and vehicle type.

        Raises:
            ConfigurationNotFoundError: If no active row exists.
        """
        row = await self._fare_matrix_row(booking_type, vehicle_type)
        if row is None:
            raise ConfigurationNotFoundError(
                "fare_matrix", {"booking_type": booking_type.value, "vehicle_type": vehicle_type}
            )
        return FareMatrixRates.from_row(row)

    async def platform_fee(self, booking_type: BookingType, vehicle_type: str) -> PlatformFee:
        """Platform fee from the rate card, or the flat fallback when there is none."""
        row = await self._fare_matrix_row(booking_type, vehicle_type)
        return PlatformFee.from_matrix(row)

    async def rental_package(self, vehicle_type: str, duration_hours: int) -> RentalPackageRates:
        query = select(RentalFare).where(
            RentalFare.is_active == True,
            RentalFare.vehicle_type == vehicle_type,
            RentalFare.duration_hours == duration_hours,
        ).order_by(
            desc(RentalFare.is_popular), desc(RentalFare.created_at), desc(RentalFare.id)
        ).limit(1)
        row = (await self.db.execute(query)).scalar_one_or_none()
        if row is None:
            raise ConfigurationNotFoundError(
                "rental_fares", {"vehicle_type": vehicle_type, "duration_hours": duration_hours}
            )
        return RentalPackageRates.from_row(row)

    async def outstation_fare(self, vehicle_type: str) -> OutstationRates:
        row = await self._freshest(OutstationFare, OutstationFare.vehicle_type == vehicle_type)
        if row is None:
            raise ConfigurationNotFoundError("outstation_fares", {"vehicle_type": vehicle_type})
        return OutstationRates.from_row(row)

    async def slab_package(self, vehicle_type: str) -> Optional[SlabPackageRates]:
        """Slab package for the vehicle, or None when slabs are not configured."""
        row = await self._freshest(
            OutstationPackage,
            OutstationPackage.vehicle_type == vehicle_type,
            OutstationPackage.use_slab_system == True,
        )
        if row is None:
            logger.info("No slab package for %s, per-km pricing will be used", vehicle_type)
            return None
        return SlabPackageRates.from_row(row)

    async def airport_fare(self, vehicle_type: str) -> AirportRates:
        row = await self._freshest(AirportFare, AirportFare.vehicle_type == vehicle_type)
        if row is None:
            raise ConfigurationNotFoundError("airport_fares", {"vehicle_type": vehicle_type})
        return AirportRates.from_row(row)

    async def zones(self) -> ZoneSet:
        """Active zones with ring roles resolved. Cached until zones change."""
        if self.use_cache:
            cached = await ConfigCache.get_zone_set()
            if cached is not None:
                return cached

        result = await self.db.execute(
            select(Zone).where(Zone.is_active == True).order_by(Zone.created_at, Zone.id)
        )
        definitions = []
        for zone in result.scalars().all():
            try:
                definitions.append(ZoneDefinition.from_row(zone))
            except ValidationError:
                logger.warning("Skipping zone %s with malformed center or radius", zone.id)
        zone_set = ZoneSet.from_zones(definitions)

        if self.use_cache:
            await ConfigCache.set_zone_set(zone_set)
        return zone_set
