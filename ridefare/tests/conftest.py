"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from ridefare.app.main import app
from ridefare.app.db.session import get_db, Base
import ridefare.app.core.redis_client as redis_client_module
from ridefare.app.domain.geo.distance import Coordinate
from ridefare.app.models.airport_fare import AirportFare
from ridefare.app.models.fare_matrix import FareMatrix
from ridefare.app.models.outstation_fare import OutstationFare, OutstationPackage, SLAB_LIMITS_KM
from ridefare.app.models.pricing_enums import BookingType, ZoneRole
from ridefare.app.models.rental_fare import RentalFare
from ridefare.app.models.zone import Zone

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

CITY_CENTER = Coordinate(latitude=12.7401984, longitude=77.824)
VEHICLE = "sedan"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}

    async def ping(self):
        return True

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        return True

    async def delete(self, key):
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def flushdb(self):
        self.store = {}


# Redis Fixture (Session Scope)
@pytest.fixture(scope="session")
def redis_client_session():
    return MockRedis()


@pytest.fixture(scope="session", autouse=True)
def apply_overrides(redis_client_session):
    """Swap the global Redis client for the mock for the whole session."""
    original_client = redis_client_module.redis_client
    redis_client_module.redis_client = redis_client_session
    yield

    app.dependency_overrides = {}
    redis_client_module.redis_client = original_client


@pytest.fixture
async def session_factory(redis_client_session):
    """Fresh in-memory database per test, wired into the app."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await redis_client_session.flushdb()

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield factory

    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture
async def client(session_factory):
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seeded_config(db_session):
    """
    Standard configuration for VEHICLE:

    - regular: base 50, 10/km, no surge, platform fee 10
    - rings: inner 5 km and outer 15 km around the city center
    - rental: 4 h package, 800 for 40 km, 12/extra km, 2/extra minute
    - outstation: base 300, 11/km, 300/day allowance, 250 km/day;
      slabs at 20 per km of tier, 15/extra km; platform fee 10
    - airport: 600 to the airport, 700 from it
    """
    db_session.add_all([
        FareMatrix(
            booking_type=BookingType.REGULAR, vehicle_type=VEHICLE,
            base_fare=50, per_km_rate=10, surge_multiplier=1.0, platform_fee=10, minimum_fare=80,
        ),
        FareMatrix(
            booking_type=BookingType.OUTSTATION, vehicle_type=VEHICLE,
            base_fare=0, per_km_rate=0, surge_multiplier=1.0, platform_fee=10,
        ),
        Zone(
            name="Hosur Inner Ring", role=ZoneRole.INNER_RING,
            center_latitude=CITY_CENTER.latitude, center_longitude=CITY_CENTER.longitude, radius_km=5,
        ),
        Zone(
            name="Hosur Outer Ring", role=ZoneRole.OUTER_RING,
            center_latitude=CITY_CENTER.latitude, center_longitude=CITY_CENTER.longitude, radius_km=15,
        ),
        RentalFare(
            vehicle_type=VEHICLE, duration_hours=4, package_name="4 Hours / 40 km",
            base_fare=800, km_included=40, extra_km_rate=12, extra_minute_rate=2, is_popular=True,
        ),
        OutstationFare(
            vehicle_type=VEHICLE, base_fare=300, per_km_rate=11,
            driver_allowance_per_day=300, daily_km_limit=250,
        ),
        OutstationPackage(
            vehicle_type=VEHICLE, use_slab_system=True, extra_km_rate=15,
            **{f"slab_{limit}km": limit * 20 for limit in SLAB_LIMITS_KM},
        ),
        AirportFare(vehicle_type=VEHICLE, to_airport_fare=600, from_airport_fare=700),
    ])
    await db_session.commit()
    return VEHICLE
