import json
import logging
from typing import Any, Iterable, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from backoffice.app.services.cache import ICacheStore

logger = logging.getLogger(__name__)


class RedisCacheStore(ICacheStore):
    """JSON cache on Redis. Every key is namespaced with key_prefix."""

    def __init__(self, redis: Redis, key_prefix: str = "", default_ttl: int = 300):
        self.redis = redis
        self.key_prefix = key_prefix
        self.default_ttl = default_ttl

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> Optional[Any]:
        try:
            raw = await self.redis.get(self._key(key))
        except RedisError as e:
            logger.warning(f"Cache get failed for {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding undecodable cache entry {key}")
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        try:
            payload = json.dumps(value, default=str)
            await self.redis.set(self._key(key), payload, ex=ttl or self.default_ttl)
        except (RedisError, TypeError) as e:
            logger.warning(f"Cache set failed for {key}: {e}")

    async def delete(self, key: str) -> None:
        try:
            await self.redis.delete(self._key(key))
        except RedisError as e:
            logger.warning(f"Cache delete failed for {key}: {e}")

    async def delete_many(self, keys: Iterable[str]) -> None:
        prefixed = [self._key(key) for key in keys]
        if not prefixed:
            return
        try:
            await self.redis.delete(*prefixed)
        except RedisError as e:
            logger.warning(f"Cache delete failed for {len(prefixed)} keys: {e}")

    async def delete_pattern(self, pattern: str) -> int:
        deleted = 0
        try:
            batch = []
            async for key in self.redis.scan_iter(match=self._key(pattern), count=100):
                batch.append(key)
                if len(batch) >= 100:
                    deleted += await self.redis.delete(*batch)
                    batch = []
            if batch:
                deleted += await self.redis.delete(*batch)
        except RedisError as e:
            logger.warning(f"Cache pattern delete failed for {pattern}: {e}")
        return deleted

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self.redis.exists(self._key(key)))
        except RedisError as e:
            logger.warning(f"Cache exists failed for {key}: {e}")
            return False

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError as e:
            logger.warning(f"Cache ping failed: {e}")
            return False
