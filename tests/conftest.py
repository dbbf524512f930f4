"""Pytest configuration for all tests."""

import logging
from typing import AsyncGenerator

import pytest
import pytest_asyncio
import structlog
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from mbc_cms.core.config import Settings, get_settings
from mbc_cms.domain.services import RoleManager
from mbc_cms.infrastructure.auth import hash_password
from mbc_cms.infrastructure.persistence import models  # noqa: F401
from mbc_cms.infrastructure.persistence.database import Base, enable_sqlite_foreign_keys
from mbc_cms.infrastructure.persistence.models import UserModel

ADMIN_EMAIL = "admin@mountainbackpackers.co.za"
TEST_PASSWORD = "Tr4il-H3ad!"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings for tests: testing environment, file logging under tmp_path."""
    return Settings(
        environment="testing",
        database_url="sqlite+aiosqlite:///:memory:",
        admin_email=ADMIN_EMAIL,
        admin_password=TEST_PASSWORD,
        log_dir=str(tmp_path / "logs"),
        log_file_enabled=False,
    )


@pytest.fixture
def reset_logging():
    """Restore logging and cached settings after tests that reconfigure them."""
    get_settings.cache_clear()
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    structlog.reset_defaults()
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with foreign keys enforced and all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def role_manager(session_factory: async_sessionmaker[AsyncSession]) -> RoleManager:
    return RoleManager(session_factory)


@pytest.fixture
def broken_session_factory(tmp_path) -> async_sessionmaker[AsyncSession]:
    """Session factory whose database cannot be opened."""
    broken_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'unreachable.db'}",
        poolclass=StaticPool,
    )
    return async_sessionmaker(broken_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def create_user(session_factory: async_sessionmaker[AsyncSession]):
    """Return a coroutine function inserting a user with an argon2 hashed password."""

    async def _create_user(
        email: str,
        role_id: str,
        password: str = TEST_PASSWORD,
        active: bool = True,
    ) -> UserModel:
        async with session_factory() as session:
            user = UserModel(
                email=email,
                password_hash=hash_password(password),
                role_id=role_id,
                active=active,
            )
            session.add(user)
            await session.commit()
            return user

    return _create_user


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    role_manager: RoleManager,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client bound to the in-memory database."""
    from mbc_cms.infrastructure.api.app import app
    from mbc_cms.infrastructure.api.dependencies import get_role_manager
    from mbc_cms.infrastructure.persistence.database import get_db_session

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_role_manager] = lambda: role_manager

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}
