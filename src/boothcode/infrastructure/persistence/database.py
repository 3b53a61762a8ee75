"""Database abstraction layer using SQLAlchemy 2.0 async.

This module provides the session management and engine configuration used by
the database-backed code registry. It supports both SQLite (aiosqlite) and
PostgreSQL (asyncpg) drivers.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from boothcode.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class DatabaseManager:
    """Database connection and session manager.

    This class manages the async database engine and session factory.
    It provides context managers for database sessions and handles
    connection pooling.
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        """Initialize the database manager.

        Args:
            database_url: SQLAlchemy async URL, e.g. sqlite+aiosqlite:///./data/boothcode.db.
            echo: Log every SQL statement.
        """
        self.database_url = database_url
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine."""
        if self._engine is None:
            kwargs: dict[str, Any] = {"echo": self.echo}
            if self.is_sqlite:
                kwargs["connect_args"] = {"check_same_thread": False}
                if ":memory:" in self.database_url:
                    # One shared connection, otherwise each session sees an empty database
                    kwargs["poolclass"] = StaticPool

            self._engine = create_async_engine(self.database_url, **kwargs)
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.debug("Database session factory created")
        return self._session_factory

    def ensure_sqlite_directory(self) -> None:
        """Create the parent directory of a file-based SQLite database."""
        if not self.is_sqlite or ":memory:" in self.database_url:
            return
        # Extract path from sqlite+aiosqlite:///path/to/file.db
        db_path = Path(self.database_url.split(":///")[-1])
        db_path.parent.mkdir(parents=True, exist_ok=True)

    async def create_tables(self) -> None:
        """Create all database tables that don't exist yet."""
        # Import models so they are registered with Base.metadata
        from boothcode.infrastructure.persistence.models import IssuedCodeModel  # noqa: F401

        self.ensure_sqlite_directory()
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
        """Provide a transactional scope for database operations.

        Yields:
            AsyncSession: SQLAlchemy async session.

        Example:
            async with db.session() as session:
                result = await session.execute(select(IssuedCodeModel))
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
