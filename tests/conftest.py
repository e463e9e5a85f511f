"""Pytest fixtures for testing."""
from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from api.main import create_app
from core.config import Settings
from core.security import create_access_token, hash_password
from db.session import get_async_session
from models.base import Base
from models.user import User

TEST_JWT_SECRET = "test-jwt-secret-0123456789abcdef0123456789"
TEST_REGISTRATION_CODE = "112211"
TEST_PASSWORD = "correct-horse-battery"


@pytest.fixture
def settings() -> Settings:
    """Settings for an isolated in-memory database."""
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite://",
        jwt_secret_key=TEST_JWT_SECRET,
        registration_code=TEST_REGISTRATION_CODE,
        auto_create_tables=False,
        strict_reorder=False,
    )


@pytest.fixture
async def app(settings: Settings) -> AsyncGenerator[FastAPI]:
    """Create an app with its own fresh in-memory database and schema."""
    application = create_app(settings)
    engine = application.state.engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield application

    application.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture
async def db_session(app: FastAPI) -> AsyncGenerator[AsyncSession]:
    """Session on the app's database; shared with requests made through the clients."""
    async with app.state.session_factory() as session:
        yield session


@pytest.fixture
async def client(app: FastAPI, db_session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Unauthenticated test client with database session override."""

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


async def make_user(db_session: AsyncSession, username: str) -> User:
    """Insert a user with TEST_PASSWORD."""
    user = User(username=username, password_hash=hash_password(TEST_PASSWORD))
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


def bearer_headers(user: User, settings: Settings) -> dict[str, str]:
    """Authorization header carrying a fresh session token for the user."""
    token = create_access_token(user.id, user.username, settings.jwt_secret_key)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user."""
    return await make_user(db_session, "alice")


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Create a second user for isolation tests."""
    return await make_user(db_session, "mallory")


@pytest.fixture
async def auth_client(
    app: FastAPI,
    client: AsyncClient,  # noqa: ARG001 - installs the session override
    test_user: User,
    settings: Settings,
) -> AsyncGenerator[AsyncClient]:
    """Client authenticated as test_user."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=bearer_headers(test_user, settings),
    ) as test_client:
        yield test_client


@pytest.fixture
async def other_client(
    app: FastAPI,
    client: AsyncClient,  # noqa: ARG001 - installs the session override
    other_user: User,
    settings: Settings,
) -> AsyncGenerator[AsyncClient]:
    """Client authenticated as other_user."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=bearer_headers(other_user, settings),
    ) as test_client:
        yield test_client
