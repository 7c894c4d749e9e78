"""Pytest fixtures for testing."""
import os

# Settings are read at import time by db.session and api.main, so the
# environment must be in place before any app module is imported.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-with-at-least-32-bytes"
os.environ["REDIS_ENABLED"] = "false"

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.config import get_settings  # noqa: E402
from core.security import create_access_token  # noqa: E402
from models.base import Base  # noqa: E402
from models.user import User  # noqa: E402
from services import user_service  # noqa: E402

TEST_PASSWORD = "test1234"


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create a fresh in-memory database for each test.

    StaticPool keeps a single connection so the in-memory database survives
    across sessions for the lifetime of the engine.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create an async session shared by the test and the app under test."""
    session_factory = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
async def user(db_session: AsyncSession) -> User:
    """A registered user."""
    return await user_service.create_user(
        db_session, "duy0209@gmail.com", TEST_PASSWORD,
    )


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second registered user, used to check ownership isolation."""
    return await user_service.create_user(
        db_session, "someone.else@gmail.com", TEST_PASSWORD,
    )


def auth_headers(user_id: int) -> dict[str, str]:
    """Bearer header carrying a fresh access token for the user."""
    token = create_access_token(user_id, get_settings())
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(
    db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient]:
    """Create an unauthenticated test client with database session override."""
    get_settings.cache_clear()

    from api.main import app
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def auth_client(client: AsyncClient, user: User) -> AsyncClient:
    """Test client authenticated as `user`."""
    client.headers.update(auth_headers(user.id))
    return client


@pytest.fixture
async def other_client(
    client: AsyncClient,  # noqa: ARG001 - installs the session override
    other_user: User,
) -> AsyncGenerator[AsyncClient]:
    """Separate test client authenticated as `other_user`."""
    from api.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=auth_headers(other_user.id),
    ) as test_client:
        yield test_client
