"""
Outstation fare database models.

Per-km outstation rates and the same-day slab packages.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean
from sqlalchemy.sql import func
from ridefare.app.db.session import Base

SLAB_LIMITS_KM = tuple(range(10, 160, 10))


class OutstationFare(Base):
    """
    Outstation per-km rate card. Shared by one-way and round trips.
    """
    __tablename__ = "outstation_fares"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    vehicle_type = Column(String(50), nullable=False, index=True)
    base_fare = Column(Float, nullable=True)
    per_km_rate = Column(Float, nullable=True)
    driver_allowance_per_day = Column(Float, nullable=True)
    daily_km_limit = Column(Float, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<OutstationFare(id={self.id}, vehicle={self.vehicle_type}, per_km={self.per_km_rate})>"


class OutstationPackage(Base):
    """
    Outstation slab package.

    Fifteen flat-fare distance tiers (10 km .. 150 km) plus a rate for
    distance beyond the selected tier.
    """
    __tablename__ = "outstation_packages"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    vehicle_type = Column(String(50), nullable=False, index=True)
    use_slab_system = Column(Boolean, default=True, nullable=False)

    slab_10km = Column(Float, nullable=True)
    slab_20km = Column(Float, nullable=True)
    slab_30km = Column(Float, nullable=True)
    slab_40km = Column(Float, nullable=True)
    slab_50km = Column(Float, nullable=True)
    slab_60km = Column(Float, nullable=True)
    slab_70km = Column(Float, nullable=True)
    slab_80km = Column(Float, nullable=True)
    slab_90km = Column(Float, nullable=True)
    slab_100km = Column(Float, nullable=True)
    slab_110km = Column(Float, nullable=True)
    slab_120km = Column(Float, nullable=True)
    slab_130km = Column(Float, nullable=True)
    slab_140km = Column(Float, nullable=True)
    slab_150km = Column(Float, nullable=True)
    extra_km_rate = Column(Float, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def slab_fares(self):
        """Yield (limit_km, raw fare) for every tier in ascending order."""
        for limit in SLAB_LIMITS_KM:
            yield limit, getattr(self, f"slab_{limit}km")

    def __repr__(self):
        return f"<OutstationPackage(id={self.id}, vehicle={self.vehicle_type})>"
