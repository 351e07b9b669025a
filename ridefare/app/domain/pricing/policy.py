"""
Pricing policy constants, taken from application settings.
"""

from pydantic import BaseModel, ConfigDict

from ridefare.app.core.config import Settings, settings as app_settings
from ridefare.app.domain.geo.distance import Coordinate


class PricingPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_km_included: float = 4.0
    gst_rate_charges: float = 0.05
    gst_rate_platform_fee: float = 0.18
    slab_max_distance_km: float = 150.0
    default_rental_hours: int = 4
    city_center: Coordinate = Coordinate(latitude=12.7401984, longitude=77.824)
    deadhead_reference: Coordinate = Coordinate(latitude=12.7401984, longitude=77.824)

    @classmethod
    def from_settings(cls, config: Settings = app_settings) -> "PricingPolicy":
        return cls(
            base_km_included=config.regular_base_km_included,
            gst_rate_charges=config.gst_rate_charges,
            gst_rate_platform_fee=config.gst_rate_platform_fee,
            slab_max_distance_km=config.slab_max_distance_km,
            default_rental_hours=config.default_rental_hours,
            city_center=Coordinate(latitude=config.city_center_lat, longitude=config.city_center_lng),
            deadhead_reference=Coordinate(
                latitude=config.deadhead_reference_lat, longitude=config.deadhead_reference_lng
            ),
        )
