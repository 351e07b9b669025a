"""
Admin Fare Configuration API Endpoints.

Manages the configuration store read by the pricing engine. Rows are only
ever inserted; the resolver uses the newest active row per key.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from typing import List, Optional

from ridefare.app.db.session import Base, get_db
from ridefare.app.models.airport_fare import AirportFare
from ridefare.app.models.fare_matrix import FareMatrix
from ridefare.app.models.outstation_fare import OutstationFare, OutstationPackage
from ridefare.app.models.rental_fare import RentalFare
from ridefare.app.models.zone import Zone
from ridefare.app.schemas.fare_config import (
    AirportFareCreate, AirportFareResponse,
    FareMatrixCreate, FareMatrixResponse,
    OutstationFareCreate, OutstationFareResponse,
    OutstationPackageCreate, OutstationPackageResponse,
    RentalFareCreate, RentalFareResponse,
    ZoneCreate, ZoneResponse,
)
from ridefare.app.services.audit import log_event, AuditAction
from ridefare.app.services.cache import ConfigCache

router = APIRouter(prefix="/admin", tags=["Admin - Fare Configuration"])


async def _insert(db: AsyncSession, row: Base, action: str = AuditAction.FARE_CONFIG_CREATED):
    db.add(row)
    await db.commit()
    await db.refresh(row)

    await log_event(
        db=db,
        action=action,
        entity_type=row.__tablename__,
        entity_id=row.id,
        metadata={"vehicle_type": getattr(row, "vehicle_type", None)}
    )
    return row


async def _list(db: AsyncSession, model, vehicle_type: Optional[str] = None):
    query = select(model).order_by(desc(model.created_at), desc(model.id))
    if vehicle_type:
        query = query.where(model.vehicle_type == vehicle_type)
    result = await db.execute(query)
    return result.scalars().all()


@router.post("/fare-matrix", response_model=FareMatrixResponse)
async def create_fare_matrix(
    payload: FareMatrixCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a rate card for a booking type and vehicle type."""
    return await _insert(db, FareMatrix(**payload.model_dump(), is_active=True))


@router.get("/fare-matrix", response_model=List[FareMatrixResponse])
async def list_fare_matrix(
    vehicle_type: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    return await _list(db, FareMatrix, vehicle_type)


@router.post("/rental-fares", response_model=RentalFareResponse)
async def create_rental_fare(
    payload: RentalFareCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create an hourly rental package."""
    return await _insert(db, RentalFare(**payload.model_dump(), is_active=True))


@router.get("/rental-fares", response_model=List[RentalFareResponse])
async def list_rental_fares(
    vehicle_type: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    return await _list(db, RentalFare, vehicle_type)


@router.post("/outstation-fares", response_model=OutstationFareResponse)
async def create_outstation_fare(
    payload: OutstationFareCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create per-km outstation rates."""
    return await _insert(db, OutstationFare(**payload.model_dump(), is_active=True))


@router.get("/outstation-fares", response_model=List[OutstationFareResponse])
async def list_outstation_fares(
    vehicle_type: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    return await _list(db, OutstationFare, vehicle_type)


@router.post("/outstation-packages", response_model=OutstationPackageResponse)
async def create_outstation_package(
    payload: OutstationPackageCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a same-day slab package."""
    return await _insert(db, OutstationPackage(**payload.model_dump(), is_active=True))


@router.get("/outstation-packages", response_model=List[OutstationPackageResponse])
async def list_outstation_packages(
    vehicle_type: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    return await _list(db, OutstationPackage, vehicle_type)


@router.post("/airport-fares", response_model=AirportFareResponse)
async def create_airport_fare(
    payload: AirportFareCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create flat airport transfer fares."""
    return await _insert(db, AirportFare(**payload.model_dump(), is_active=True))


@router.get("/airport-fares", response_model=List[AirportFareResponse])
async def list_airport_fares(
    vehicle_type: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    return await _list(db, AirportFare, vehicle_type)


@router.post("/zones", response_model=ZoneResponse)
async def create_zone(
    payload: ZoneCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Create a geofence.

    Invalidates the cached zone set so the next fare sees the new ring.
    """
    zone = await _insert(db, Zone(**payload.model_dump(), is_active=True), AuditAction.ZONE_CREATED)
    await ConfigCache.invalidate_zones()
    return zone


@router.get("/zones", response_model=List[ZoneResponse])
async def list_zones(
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(Zone).order_by(Zone.created_at, Zone.id))
    return result.scalars().all()
