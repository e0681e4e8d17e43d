import os
import uuid
from typing import AsyncGenerator

# Use in-memory SQLite for testing.
# Must be set before anything imports groundwork.core.config.
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["AUDIT_ENABLED"] = "false"
os.environ["APP_ENV"] = "test"
os.environ.pop("DEFAULT_TENANT_ID", None)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import groundwork.domain  # noqa: E402,F401  registers every model on Base.metadata
from groundwork.db.base import Base, get_db  # noqa: E402
from groundwork.main import app  # noqa: E402


@pytest_asyncio.fixture
async def test_engine():
    """A fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A session for seeding and inspecting rows outside the API."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def tenant_id() -> str:
    return str(uuid.uuid4())


@pytest_asyncio.fixture
async def _db_override(session_factory):
    async def get_db_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = get_db_override
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(name="client")
async def client_fixture(_db_override, tenant_id: str) -> AsyncGenerator[AsyncClient, None]:
    """Client whose requests are scoped to `tenant_id` through the X-Tenant-Id header."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://localhost",
        headers={"X-Tenant-Id": tenant_id},
    ) as client:
        yield client


@pytest_asyncio.fixture(name="anonymous_client")
async def anonymous_client_fixture(_db_override) -> AsyncGenerator[AsyncClient, None]:
    """Client that sends no tenant header."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client
