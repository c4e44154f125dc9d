"""Pytest configuration for all tests."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from warden.core.config import Settings
from warden.domain.services import AuthenticationService, AuthorizationService
from warden.infrastructure.auth import JWTService
from warden.infrastructure.persistence.database import Base, create_session_factory

# Importing the models registers their tables on Base.metadata
from warden.infrastructure.persistence import models  # noqa: F401

TEST_SECRET_KEY = "test-secret-key-that-is-long-enough-for-hs256"


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an in-process test application."""
    return Settings(
        environment="testing",
        database_url="sqlite+aiosqlite:///:memory:",
        secret_key=TEST_SECRET_KEY,
        run_migrations_on_startup=False,
        log_format="console",
    )


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite engine with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def jwt_service() -> JWTService:
    return JWTService(TEST_SECRET_KEY)


@pytest.fixture
def auth_service(
    session_factory: async_sessionmaker[AsyncSession], jwt_service: JWTService
) -> AuthenticationService:
    return AuthenticationService(session_factory, jwt_service)


@pytest.fixture
def authz_service(session_factory: async_sessionmaker[AsyncSession]) -> AuthorizationService:
    return AuthorizationService(session_factory)


@pytest.fixture
def app(test_settings: Settings, session_factory, jwt_service):
    """Create a FastAPI app bound to the in-memory test database."""
    from warden.infrastructure.api.app import create_app
    from warden.infrastructure.api.dependencies import (
        get_session_factory,
        get_token_service,
    )

    app = create_app(test_settings)
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_token_service] = lambda: jwt_service

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
