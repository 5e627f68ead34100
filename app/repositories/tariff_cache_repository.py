# app/repositories/tariff_cache_repository.py

import json
from redis import Redis
from redis.exceptions import RedisError

from app.core import logger, settings
from app.schemas.tariff_schema import TariffRecord


class TariffCacheRepository:
    """
    Read-through cache of whole energy-source partitions.
    Cache errors are logged and treated as a miss; the SQL store stays the source of truth.
    """

    def __init__(self, redis_client: Redis, ttl: int | None = None):
        self.redis = redis_client
        self.ttl = ttl if ttl is not None else settings.TARIFF_CACHE_TTL

    @staticmethod
    def _key(energy_source: str) -> str:
        return f"tariffs:source:{energy_source}"

    def get_partition(self, energy_source: str) -> list[TariffRecord] | None:
        key = self._key(energy_source)
        try:
            cached = self.redis.get(key)
        except RedisError as e:
            logger.warning(f"⚠️ Cache read failed for {key}: {e}")
            return None

        if cached is None:
            return None

        try:
            return [TariffRecord.model_validate(item) for item in json.loads(cached)]
        except (ValueError, TypeError) as e:
            logger.error(f"❌ Corrupt cache entry {key}, dropping it: {e}")
            self.invalidate([energy_source])
            return None

    def set_partition(self, energy_source: str, records: list[TariffRecord]) -> None:
        key = self._key(energy_source)
        payload = json.dumps([record.model_dump(mode="json") for record in records])
        try:
            self.redis.setex(key, self.ttl, payload)
        except RedisError as e:
            logger.warning(f"⚠️ Cache write failed for {key}: {e}")

    def invalidate(self, energy_sources) -> None:
        keys = [self._key(source) for source in set(energy_sources)]
        if not keys:
            return
        try:
            self.redis.delete(*keys)
        except RedisError as e:
            logger.warning(f"⚠️ Cache invalidation failed: {e}")
