import logging
from typing import Optional

from fastapi import Depends, Request, Response

from backoffice.app.services.rate_limiter import rate_limit_headers
from backoffice.depends import get_client_ip, get_container
from backoffice.domain.errors import RateLimitExceeded

logger = logging.getLogger(__name__)


class RateLimit:
    """
    Route dependency applying one named tier.

    User tiers key on request.state.user_id, so list them after
    get_current_user; anonymous callers fall back to their IP.
    """

    def __init__(self, tier: str, namespace: Optional[str] = None):
        self.tier = tier
        self.namespace = namespace

    def identifier(self, request: Request, by_user: bool) -> str:
        user_id = getattr(request.state, "user_id", None) if by_user else None
        identifier = f"user:{user_id}" if user_id else f"ip:{get_client_ip(request)}"
        if self.namespace:
            identifier = f"{self.namespace}:{identifier}"
        return identifier

    async def __call__(
        self, request: Request, response: Response, container=Depends(get_container)
    ) -> None:
        tier = container.rate_limit_tiers[self.tier]
        identifier = self.identifier(request, tier.by_user)
        result = await container.rate_limiter.check_rate_limit(
            identifier, tier.max_requests, tier.window_ms
        )

        if not result.allowed:
            logger.warning(f"Rejected {request.method} {request.url.path} for {identifier}")
            raise RateLimitExceeded(headers=rate_limit_headers(result, rejected=True))

        for name, value in rate_limit_headers(result).items():
            response.headers[name] = value


public_rate_limit = RateLimit("public")
auth_rate_limit = RateLimit("auth")
user_rate_limit = RateLimit("user")
store_create_rate_limit = RateLimit("store_create", namespace="store-create")
store_update_rate_limit = RateLimit("store_update", namespace="store-update")
