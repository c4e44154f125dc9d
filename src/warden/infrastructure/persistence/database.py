"""Database abstraction layer using SQLAlchemy 2.0 async.

The ``DatabaseManager`` owns the single connection pool of the process. It is
constructed explicitly at startup and handed to whatever needs storage; no
store reaches for a global handle. Both SQLite (aiosqlite) and PostgreSQL
(asyncpg) drivers are supported.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from warden.core.config import Settings
from warden.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory used by repositories and services.

    Objects stay usable after commit so services can return them once their
    session is closed.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def _on_sqlite_connect(dbapi_connection, connection_record) -> None:
    # Stop the driver from managing transactions; _on_sqlite_begin emits BEGIN.
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _on_sqlite_begin(conn) -> None:
    conn.exec_driver_sql("BEGIN")


def configure_sqlite_engine(engine: AsyncEngine) -> AsyncEngine:
    """Enable foreign keys and emit ``BEGIN`` at the start of every transaction.

    DDL and DML run in one ``engine.begin()`` block then commit or roll back
    together, as they do on PostgreSQL.
    """
    event.listen(engine.sync_engine, "connect", _on_sqlite_connect)
    event.listen(engine.sync_engine, "begin", _on_sqlite_begin)
    return engine


class DatabaseManager:
    """Database engine and session manager.

    The engine is created lazily on first use so constructing the manager
    never touches the network.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the database manager.

        Args:
            settings: Application settings holding the connection string and
                pool configuration.
        """
        self.settings = settings
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine."""
        if self._engine is None:
            if self.settings.is_sqlite:
                # SQLite ignores the pool sizing knobs
                self._engine = configure_sqlite_engine(
                    create_async_engine(
                        self.settings.database_url,
                        echo=self.settings.db_echo,
                        connect_args={"check_same_thread": False},
                    )
                )
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
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = create_session_factory(self.engine)
            logger.debug("Database session factory created")
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session that is rolled back on error and always closed.

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

    def ensure_sqlite_directory(self) -> None:
        """Create the parent directory of a file-backed SQLite database."""
        if not self.settings.is_sqlite:
            return
        db_path = self.settings.database_url.split(":///")[-1]
        if not db_path or db_path.startswith(":memory:"):
            return
        db_dir = Path(db_path).parent
        db_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("Database directory ensured", path=str(db_dir))

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

    async def disconnect(self) -> None:
        """Dispose of the engine and every pooled connection."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")
