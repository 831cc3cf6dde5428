"""Test fixtures and configuration."""

import os

# Settings are read at import time; pin the test environment before any app import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.pop("REDIS_URL", None)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from tourism import database  # noqa: E402
from tourism.rate_limit import auth_rate_limiter, register_rate_limiter  # noqa: E402


@pytest.fixture(autouse=True)
def reset_rate_limiters():
    """Every test starts with fresh login/register quotas."""
    auth_rate_limiter.clear()
    register_rate_limiter.clear()
    yield
    auth_rate_limiter.clear()
    register_rate_limiter.clear()


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Engine over a throwaway SQLite file with the full schema.

    A file (not :memory:) so every session gets its own connection and
    concurrent requests contend the way they would on a real server.
    """
    from tourism import models  # noqa: F401

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'tourism_test.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(db_engine):
    """Point the app's get_db dependency at the test engine."""
    maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    previous = database.set_test_session_maker(maker)
    yield maker
    database.set_test_session_maker(previous)


@pytest_asyncio.fixture
async def db(session_maker):
    """Session for arranging and inspecting data directly."""
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def test_user(db):
    """Active customer whose password is tests.factories.DEFAULT_PASSWORD."""
    from tests.factories import UserFactory

    return await UserFactory.create_async(db, email="traveller@example.com", name="Traveller")


@pytest_asyncio.fixture
async def public_client(session_maker):
    """Async test client without auth headers."""
    from tourism.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def client(session_maker, test_user):
    """Async test client authenticated as test_user."""
    from tourism.main import app
    from tourism.security import create_access_token

    token = create_access_token(test_user.id, test_user.role.value)
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Authorization": f"Bearer {token}"},
    ) as client:
        yield client
