"""
FastAPI Application Entry Point.

Ride Fare Backend: fare quotes, ride completion and GPS trip distance.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from ridefare.app.core.config import settings
from ridefare.app.core.redis_client import ping_redis
from ridefare.app.core.observability import ObservabilityMiddleware, configure_logging
from ridefare.app.api.v1.router import router as api_v1_router
from ridefare.app.db.session import engine, Base
from ridefare.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from ridefare.app.models.audit_log import AuditLog
from ridefare.app.models.fare_matrix import FareMatrix
from ridefare.app.models.rental_fare import RentalFare
from ridefare.app.models.outstation_fare import OutstationFare, OutstationPackage
from ridefare.app.models.airport_fare import AirportFare
from ridefare.app.models.zone import Zone
from ridefare.app.models.ride import Ride
from ridefare.app.models.trip_location import TripLocation
from ridefare.app.models.trip_completion import TripCompletion

configure_logging(settings.log_level)
logger = logging.getLogger("ridefare")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup; release pooled connections on shutdown."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s %s started", settings.app_name, settings.api_version)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Fare calculation and GPS trip distance for ride hailing",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Liveness plus the state of the zone cache backend.

    Redis being down does not fail the check; fares fall back to the database.
    """
    redis_ok = await ping_redis()
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
        "redis": "ok" if redis_ok else "unavailable",
    }


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Welcome to Ride Fare Backend API",
        "docs": "/docs",
        "health": "/health",
    }
