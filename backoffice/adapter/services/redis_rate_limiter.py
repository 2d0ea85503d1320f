"""
Sliding-window rate limiter on a Redis sorted set.

Each identifier owns one sorted set of request markers scored by their
timestamp in ms. A check purges markers older than the window, counts
what is left, and records the current request in one MULTI/EXEC
pipeline, so every attempt consumes a slot, rejected or not.
"""

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from backoffice.app.services.rate_limiter import IRateLimiter, RateLimitResult

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class RedisRateLimiter(IRateLimiter):
    def __init__(self, redis: Redis, key_prefix: str = ""):
        self.redis = redis
        self.key_prefix = key_prefix

    def _key(self, identifier: str) -> str:
        return f"{self.key_prefix}ratelimit:{identifier}"

    async def check_rate_limit(
        self,
        identifier: str,
        max_requests: int,
        window_ms: int,
        now_ms: Optional[int] = None,
    ) -> RateLimitResult:
        now = now_ms if now_ms is not None else _now_ms()
        reset_at = datetime.fromtimestamp((now + window_ms) / 1000, tz=timezone.utc)
        key = self._key(identifier)

        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.zremrangebyscore(key, "-inf", now - window_ms)
            pipe.zcard(key)
            pipe.zadd(key, {f"{now}-{uuid.uuid4().hex[:12]}": now})
            pipe.pexpire(key, window_ms)
            results = await pipe.execute()
        except RedisError as e:
            # Fail open
            logger.error(f"Rate limit check failed for {identifier}: {e}")
            return RateLimitResult(
                allowed=True, remaining=max_requests, reset_at=reset_at, limit=max_requests
            )

        count = int(results[1])
        allowed = count < max_requests
        if not allowed:
            logger.warning(f"Rate limit exceeded for {identifier}: {count}/{max_requests}")

        return RateLimitResult(
            allowed=allowed,
            remaining=max(0, max_requests - count - 1),
            reset_at=reset_at,
            limit=max_requests,
        )

    async def reset_rate_limit(self, identifier: str) -> None:
        try:
            await self.redis.delete(self._key(identifier))
        except RedisError as e:
            logger.error(f"Rate limit reset failed for {identifier}: {e}")

    async def get_remaining_requests(
        self, identifier: str, max_requests: int, window_ms: int
    ) -> int:
        """Remaining slots in the current window, without consuming one."""
        key = self._key(identifier)
        now = _now_ms()
        try:
            await self.redis.zremrangebyscore(key, "-inf", now - window_ms)
            count = await self.redis.zcard(key)
        except RedisError as e:
            logger.error(f"Rate limit lookup failed for {identifier}: {e}")
            return max_requests
        return max(0, max_requests - int(count))
