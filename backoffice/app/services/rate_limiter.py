from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from backoffice.domain.errors import RateLimitExceeded


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_at: datetime
    limit: int


@dataclass(frozen=True)
class RateLimitTier:
    """Named limiter configuration: same algorithm, different parameters."""

    name: str
    max_requests: int
    window_ms: int
    by_user: bool = False


class IRateLimiter(ABC):
    @abstractmethod
    async def check_rate_limit(
        self,
        identifier: str,
        max_requests: int,
        window_ms: int,
        now_ms: Optional[int] = None,
    ) -> RateLimitResult:
        pass

    @abstractmethod
    async def reset_rate_limit(self, identifier: str) -> None:
        pass

    @abstractmethod
    async def get_remaining_requests(
        self, identifier: str, max_requests: int, window_ms: int
    ) -> int:
        pass

    async def enforce_rate_limit(
        self, identifier: str, max_requests: int, window_ms: int
    ) -> RateLimitResult:
        """check_rate_limit that raises RateLimitExceeded instead of returning allowed=False."""
        result = await self.check_rate_limit(identifier, max_requests, window_ms)
        if not result.allowed:
            raise RateLimitExceeded(headers=rate_limit_headers(result, rejected=True))
        return result


def rate_limit_headers(result: RateLimitResult, rejected: bool = False) -> dict:
    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": result.reset_at.isoformat(),
    }
    if rejected:
        retry_after = (result.reset_at - datetime.now(result.reset_at.tzinfo)).total_seconds()
        headers["Retry-After"] = str(max(1, int(retry_after + 0.999)))
    return headers
