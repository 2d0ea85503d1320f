"""
Service container

Every long-lived service is built once here and handed to request
handlers through app.state. Tests pass their own redis client, unit of
work factory and OAuth provider.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, Optional

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from backoffice.adapter.services.google_oauth import GoogleOAuthProvider
from backoffice.adapter.services.redis_cache import RedisCacheStore
from backoffice.adapter.services.redis_rate_limiter import RedisRateLimiter
from backoffice.adapter.services.session_cleanup import SessionCleanupService
from backoffice.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from backoffice.app.services.activity_log_service import ActivityLogService
from backoffice.app.services.cache import ICacheStore
from backoffice.app.services.oauth_provider import IOAuthProvider
from backoffice.app.services.permission_service import PermissionService
from backoffice.app.services.rate_limiter import IRateLimiter, RateLimitTier
from backoffice.app.services.session_manager import SessionManager, UnitOfWorkFactory
from backoffice.app.services.token_service import TokenService
from backoffice.app.use_cases.stores import StoreCache

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    config: type
    redis: Redis
    uow_factory: UnitOfWorkFactory
    cache: ICacheStore
    rate_limiter: IRateLimiter
    rate_limit_tiers: Dict[str, RateLimitTier]
    token_service: TokenService
    session_manager: SessionManager
    activity_log: ActivityLogService
    permissions: PermissionService
    store_cache: StoreCache
    oauth_provider: IOAuthProvider
    session_cleanup: SessionCleanupService
    engine: Optional[AsyncEngine] = None

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(days=self.config.SESSION_TTL_DAYS)

    async def close(self) -> None:
        await self.session_cleanup.stop()
        await self.redis.aclose()
        if self.engine is not None:
            await self.engine.dispose()


def build_rate_limit_tiers(config) -> Dict[str, RateLimitTier]:
    window = config.RATE_LIMIT_WINDOW_MS
    tiers = [
        RateLimitTier("api", config.RATE_LIMIT_MAX_REQUESTS, window),
        RateLimitTier("public", config.RATE_LIMIT_MAX_PUBLIC, window),
        RateLimitTier("auth", config.RATE_LIMIT_MAX_AUTH, window),
        RateLimitTier("user", config.RATE_LIMIT_MAX_REQUESTS, window, by_user=True),
        RateLimitTier("bulk", config.RATE_LIMIT_MAX_BULK, window, by_user=True),
        RateLimitTier("upload", config.RATE_LIMIT_MAX_UPLOAD, window, by_user=True),
        RateLimitTier(
            "store_create",
            config.STORE_CREATE_MAX_REQUESTS,
            config.STORE_CREATE_WINDOW_MS,
            by_user=True,
        ),
        RateLimitTier(
            "store_update",
            config.STORE_UPDATE_MAX_REQUESTS,
            config.STORE_UPDATE_WINDOW_MS,
            by_user=True,
        ),
    ]
    return {tier.name: tier for tier in tiers}


def build_container(
    config,
    redis_client: Optional[Redis] = None,
    uow_factory: Optional[UnitOfWorkFactory] = None,
    oauth_provider: Optional[IOAuthProvider] = None,
) -> ServiceContainer:
    engine = None
    if uow_factory is None:
        engine = create_async_engine(config.DB_URI, echo=False, future=True)
        session_factory = sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        def uow_factory():
            return SqlAlchemyUnitOfWork(session_factory(), owns_session=True)

    if redis_client is None:
        redis_client = Redis.from_url(config.REDIS_URL, decode_responses=True)

    if oauth_provider is None:
        oauth_provider = GoogleOAuthProvider(
            client_id=config.GOOGLE_CLIENT_ID,
            client_secret=config.GOOGLE_CLIENT_SECRET,
            redirect_uri=config.GOOGLE_REDIRECT_URI,
            timeout=config.OAUTH_HTTP_TIMEOUT,
        )

    cache = RedisCacheStore(
        redis_client, key_prefix=config.REDIS_KEY_PREFIX, default_ttl=config.CACHE_TTL_SHORT
    )
    session_manager = SessionManager(
        uow_factory,
        cache,
        max_sessions_per_user=config.MAX_SESSIONS_PER_USER,
        cache_ttl=config.SESSION_CACHE_TTL,
    )

    return ServiceContainer(
        config=config,
        redis=redis_client,
        uow_factory=uow_factory,
        cache=cache,
        rate_limiter=RedisRateLimiter(redis_client, key_prefix=config.REDIS_KEY_PREFIX),
        rate_limit_tiers=build_rate_limit_tiers(config),
        token_service=TokenService(
            access_secret=config.JWT_ACCESS_SECRET,
            refresh_secret=config.JWT_REFRESH_SECRET,
            access_ttl=timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_ttl=timedelta(days=config.REFRESH_TOKEN_EXPIRE_DAYS),
            algorithm=config.JWT_ALGORITHM,
        ),
        session_manager=session_manager,
        activity_log=ActivityLogService(uow_factory),
        permissions=PermissionService(uow_factory, cache, cache_ttl=config.CACHE_TTL_LONG),
        store_cache=StoreCache(cache, ttl=config.CACHE_TTL_LONG),
        oauth_provider=oauth_provider,
        session_cleanup=SessionCleanupService(
            session_manager, cleanup_interval=config.SESSION_CLEANUP_INTERVAL
        ),
        engine=engine,
    )
