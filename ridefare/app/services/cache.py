"""
Configuration cache backed by Redis.

Holds the resolved active zone set so ring roles are parsed once per
configuration change rather than on every fare.
"""

import logging
from typing import Optional

from pydantic import ValidationError
from redis.exceptions import RedisError

import ridefare.app.core.redis_client as redis_client_module
from ridefare.app.core.config import settings
from ridefare.app.domain.geo.zones import ZoneSet

logger = logging.getLogger(__name__)

ZONES_CACHE_KEY = "ridefare:zones:active"


class ConfigCache:

    @staticmethod
    async def get_zone_set() -> Optional[ZoneSet]:
        try:
            raw = await redis_client_module.redis_client.get(ZONES_CACHE_KEY)
        except RedisError as exc:
            logger.warning("Zone cache read failed: %s", exc)
            return None
        if not raw:
            return None
        try:
            return ZoneSet.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable zone cache entry")
            return None

    @staticmethod
    async def set_zone_set(zone_set: ZoneSet, ttl_seconds: int = None):
        ttl = ttl_seconds or settings.zone_cache_ttl_seconds
        try:
            await redis_client_module.redis_client.set(ZONES_CACHE_KEY, zone_set.model_dump_json(), ex=ttl)
        except RedisError as exc:
            logger.warning("Zone cache write failed: %s", exc)

    @staticmethod
    async def invalidate_zones():
        try:
            await redis_client_module.redis_client.delete(ZONES_CACHE_KEY)
        except RedisError as exc:
            logger.warning("Zone cache invalidation failed: %s", exc)
