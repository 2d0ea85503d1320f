import fakeredis.aioredis
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from backoffice.adapter.services.redis_cache import RedisCacheStore
from backoffice.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from backoffice.app.services.session_manager import SessionManager
from tests.fixtures.app_config import IntegrationConfig, build_app
from tests.fixtures.fake_oauth import FakeOAuthProvider
from tests.fixtures.json_loader import TestDataLoader


@pytest.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def redis_client():
    client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def uow_factory(db_session):
    return lambda: SqlAlchemyUnitOfWork(db_session)


@pytest.fixture
def cache(redis_client):
    return RedisCacheStore(redis_client, key_prefix="test:")


@pytest.fixture
def oauth_provider():
    return FakeOAuthProvider()


@pytest.fixture
def app(redis_client, uow_factory, oauth_provider):
    return build_app(IntegrationConfig, redis_client, uow_factory, oauth_provider)


@pytest.fixture
def container(app):
    return app.state.container


@pytest.fixture
def session_manager(container) -> SessionManager:
    return container.session_manager


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
