"""
Fare configuration schemas.

Admin-facing create/read schemas for the configuration store tables.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from ridefare.app.models.pricing_enums import BookingType, ZoneRole


class FareMatrixCreate(BaseModel):
    """Schema for creating a rate card."""
    booking_type: BookingType
    vehicle_type: str = Field(..., min_length=1, max_length=50)
    base_fare: float = Field(..., ge=0)
    per_km_rate: float = Field(..., ge=0)
    surge_multiplier: float = Field(1.0, ge=1)
    platform_fee: float = Field(10.0, ge=0)
    minimum_fare: Optional[float] = Field(None, ge=0)


class FareMatrixResponse(BaseModel):
    id: int
    booking_type: BookingType
    vehicle_type: str
    base_fare: Optional[float]
    per_km_rate: Optional[float]
    surge_multiplier: Optional[float]
    platform_fee: Optional[float]
    minimum_fare: Optional[float]
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class RentalFareCreate(BaseModel):
    """Schema for creating an hourly rental package."""
    vehicle_type: str = Field(..., min_length=1, max_length=50)
    duration_hours: int = Field(..., gt=0)
    package_name: str = Field(..., min_length=1, max_length=100)
    base_fare: float = Field(..., ge=0)
    km_included: float = Field(..., ge=0)
    extra_km_rate: float = Field(..., ge=0)
    extra_minute_rate: float = Field(..., ge=0)
    is_popular: bool = False


class RentalFareResponse(BaseModel):
    id: int
    vehicle_type: str
    duration_hours: int
    package_name: str
    base_fare: Optional[float]
    km_included: Optional[float]
    extra_km_rate: Optional[float]
    extra_minute_rate: Optional[float]
    is_popular: bool
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class OutstationFareCreate(BaseModel):
    """Schema for creating per-km outstation rates."""
    vehicle_type: str = Field(..., min_length=1, max_length=50)
    base_fare: float = Field(..., ge=0)
    per_km_rate: float = Field(..., ge=0)
    driver_allowance_per_day: float = Field(..., ge=0)
    daily_km_limit: float = Field(..., ge=0)


class OutstationFareResponse(BaseModel):
    id: int
    vehicle_type: str
    base_fare: Optional[float]
    per_km_rate: Optional[float]
    driver_allowance_per_day: Optional[float]
    daily_km_limit: Optional[float]
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class OutstationPackageCreate(BaseModel):
    """Schema for creating a same-day slab package."""
    vehicle_type: str = Field(..., min_length=1, max_length=50)
    use_slab_system: bool = True
    slab_10km: float = Field(..., ge=0)
    slab_20km: float = Field(..., ge=0)
    slab_30km: float = Field(..., ge=0)
    slab_40km: float = Field(..., ge=0)
    slab_50km: float = Field(..., ge=0)
    slab_60km: float = Field(..., ge=0)
    slab_70km: float = Field(..., ge=0)
    slab_80km: float = Field(..., ge=0)
    slab_90km: float = Field(..., ge=0)
    slab_100km: float = Field(..., ge=0)
    slab_110km: float = Field(..., ge=0)
    slab_120km: float = Field(..., ge=0)
    slab_130km: float = Field(..., ge=0)
    slab_140km: float = Field(..., ge=0)
    slab_150km: float = Field(..., ge=0)
    extra_km_rate: float = Field(..., ge=0)


class OutstationPackageResponse(OutstationPackageCreate):
    id: int
    slab_10km: Optional[float]
    slab_20km: Optional[float]
    slab_30km: Optional[float]
    slab_40km: Optional[float]
    slab_50km: Optional[float]
    slab_60km: Optional[float]
    slab_70km: Optional[float]
    slab_80km: Optional[float]
    slab_90km: Optional[float]
    slab_100km: Optional[float]
    slab_110km: Optional[float]
    slab_120km: Optional[float]
    slab_130km: Optional[float]
    slab_140km: Optional[float]
    slab_150km: Optional[float]
    extra_km_rate: Optional[float]
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class AirportFareCreate(BaseModel):
    """Schema for creating flat airport transfer fares."""
    vehicle_type: str = Field(..., min_length=1, max_length=50)
    to_airport_fare: float = Field(..., ge=0)
    from_airport_fare: float = Field(..., ge=0)


class AirportFareResponse(BaseModel):
    id: int
    vehicle_type: str
    to_airport_fare: Optional[float]
    from_airport_fare: Optional[float]
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ZoneCreate(BaseModel):
    """
    Schema for creating a geofence.

    `role` may be omitted; the ring role is then read from the name
    ("Inner Ring" / "Outer Ring").
    """
    name: str = Field(..., min_length=1, max_length=100)
    role: Optional[ZoneRole] = None
    center_latitude: float = Field(..., ge=-90, le=90)
    center_longitude: float = Field(..., ge=-180, le=180)
    radius_km: float = Field(..., gt=0)


class ZoneResponse(BaseModel):
    id: int
    name: str
    role: Optional[ZoneRole]
    center_latitude: float
    center_longitude: float
    radius_km: float
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
