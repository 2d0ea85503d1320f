import fakeredis.aioredis
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock
from redis.exceptions import ConnectionError as RedisConnectionError

from backoffice.adapter.services.redis_cache import RedisCacheStore
from backoffice.app.services.activity_log_service import ActivityLogService
from backoffice.app.services.session_manager import DeviceInfo, SessionManager
from backoffice.app.services.token_service import TokenService


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest_asyncio.fixture
async def redis_client():
    client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def broken_redis():
    """Redis client whose every call fails with a connection error."""
    failure = RedisConnectionError("Connection refused")
    client = MagicMock()
    for name in ("get", "set", "delete", "exists", "ping", "zremrangebyscore", "zcard"):
        setattr(client, name, AsyncMock(side_effect=failure))
    client.pipeline.return_value.execute = AsyncMock(side_effect=failure)
    return client


@pytest.fixture
def cache(redis_client):
    return RedisCacheStore(redis_client, key_prefix="test:")


@pytest.fixture
def token_service():
    return TokenService(access_secret="access-secret", refresh_secret="refresh-secret")


@pytest.fixture
def mock_session_manager():
    return AsyncMock(spec=SessionManager)


@pytest.fixture
def mock_activity_log():
    return AsyncMock(spec=ActivityLogService)


@pytest.fixture
def device_info():
    return DeviceInfo(device_id="laptop-01", user_agent="pytest", ip_address="10.0.0.7")
