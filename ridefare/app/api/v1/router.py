"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from ridefare.app.api.v1.endpoints import admin_fare_config, fares, rides, trip_history

router = APIRouter()

# Fare quotes
router.include_router(fares.router)

# Ride lifecycle and GPS tracking
router.include_router(rides.router)

# Trip history, earnings and spending
router.include_router(trip_history.customer_router)
router.include_router(trip_history.driver_router)

# Configuration store
router.include_router(admin_fare_config.router)
