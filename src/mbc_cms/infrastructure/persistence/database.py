"""Database abstraction layer using SQLAlchemy 2.0 async.

This module provides the database session management and engine configuration
for SQLAlchemy with async support. It supports both SQLite (aiosqlite) and
PostgreSQL (asyncpg) drivers.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from mbc_cms.core.config import Settings, get_settings
from mbc_cms.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def utc_now() -> datetime:
    """Creation timestamp with microsecond precision.

    Rows are ordered by ``created_at``; SQLite's ``CURRENT_TIMESTAMP`` only
    resolves seconds, so rows inserted in the same second would tie.
    """
    return datetime.now(timezone.utc)


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on foreign key enforcement for every SQLite connection.

    SQLite ignores FOREIGN KEY clauses unless the pragma is set per connection.

    Args:
        engine: Async engine bound to a SQLite database.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class DatabaseManager:
    """Database connection and session manager.

    Owns the async engine, whose connection pool is the only shared mutable
    resource of the service, and the session factory handed to the RBAC core.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine.

        Returns:
            AsyncEngine: SQLAlchemy async engine instance.
        """
        if self._engine is None:
            if self.settings.is_sqlite:
                self._engine = create_async_engine(
                    self.settings.database_url,
                    echo=self.settings.db_echo,
                    connect_args={"check_same_thread": False},
                )
                if self.settings.db_sqlite_foreign_keys:
                    enable_sqlite_foreign_keys(self._engine)
            else:
                self._engine = create_async_engine(
                    self.settings.database_url,
                    echo=self.settings.db_echo,
                    pool_size=self.settings.db_pool_size,
                    max_overflow=self.settings.db_max_overflow,
                    pool_timeout=self.settings.db_pool_timeout,
                    pool_recycle=self.settings.db_pool_recycle,
                    pool_pre_ping=True,
                )

            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
                pool_size=self.settings.db_pool_size,
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory.

        Returns:
            async_sessionmaker: SQLAlchemy async session factory.
        """
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.debug("Database session factory created")
        return self._session_factory

    async def create_tables(self) -> None:
        """Create all database tables.

        Used in development. In production, use migrations instead.
        """
        from mbc_cms.infrastructure.persistence import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")

    async def disconnect(self) -> None:
        """Close the database engine and all connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session that is rolled back if the block raises.

        Yields:
            AsyncSession: SQLAlchemy async session.

        Example:
            async with db.session() as session:
                result = await session.execute(select(UserModel))
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def check_connection(self) -> bool:
        """Check if database connection is working.

        Returns:
            bool: True if connection is successful, False otherwise.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                logger.debug("Database connection check successful")
                return True
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False


# Global database manager instance
_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Get the global database manager instance.

    Returns:
        DatabaseManager: Global database manager instance.
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides a database session per request.

    Yields:
        AsyncSession: SQLAlchemy async session.
    """
    db = get_db_manager()
    async with db.session() as session:
        yield session


def run_migrations(settings: Settings) -> None:
    """Apply Alembic migrations up to head.

    Args:
        settings: Application settings providing the database URL and alembic.ini path.
    """
    from alembic import command
    from alembic.config import Config

    config = Config(settings.alembic_ini_path)
    config.set_main_option("sqlalchemy.url", settings.database_url)
    config.attributes["configure_logger"] = False
    command.upgrade(config, "head")
    logger.info("Database migrated")


async def init_database() -> None:
    """Initialize the database.

    Creates tables in development and applies migrations otherwise. Raises
    RuntimeError when the database is unreachable.
    """
    import asyncio

    db = get_db_manager()
    settings = db.settings

    if settings.is_sqlite:
        db_path = settings.database_url.split(":///")[-1]
        if db_path and db_path != ":memory:":
            db_dir = Path(db_path).parent
            db_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Database directory created", path=str(db_dir))

    if not await db.check_connection():
        logger.error("Database connection failed")
        raise RuntimeError("Failed to connect to database")

    if settings.is_development:
        logger.info("Development mode: Creating database tables")
        await db.create_tables()
    elif settings.run_migrations_on_startup:
        logger.info("Applying database migrations")
        # alembic/env.py drives its own event loop
        await asyncio.to_thread(run_migrations, settings)
    else:
        logger.info("Skipping migrations, run 'alembic upgrade head' manually")


async def close_database() -> None:
    """Close the database connection."""
    db = get_db_manager()
    await db.disconnect()
