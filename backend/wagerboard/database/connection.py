"""
Async database handle.

This module provides:
- Database: owns the SQLAlchemy async engine and session factory
- Explicit lifecycle (connect at startup, close at shutdown)
- Scoped session and transaction acquisition with guaranteed release
- Health check utilities
"""

import asyncio
import logging
from contextlib import asynccontextmanager, nullcontext
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from wagerboard.database.base import Base

logger = logging.getLogger(__name__)


class Database:
    """
    Explicit store handle passed to the ledger at construction.

    Usage:
        database = Database("sqlite+aiosqlite:///./wagerboard.db")
        await database.connect()
        async with database.transaction() as db:
            db.add(wager)
        await database.close()
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        # Set when every session shares one DBAPI connection
        self._shared_connection_lock: Optional[asyncio.Lock] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call connect() first.")
        return self._engine

    async def connect(self) -> None:
        """Create the engine and session factory."""
        if self._engine is not None:
            return

        engine_kwargs = {"echo": self.echo, "future": True}
        if self.url.startswith("sqlite") and ":memory:" in self.url:
            # One shared connection keeps the in-memory database alive
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            self._shared_connection_lock = asyncio.Lock()
        elif not self.url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=5,
                max_overflow=10,
                pool_pre_ping=True,
                pool_recycle=3600,
            )

        self._engine = create_async_engine(self.url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info(f"Database engine created for {self.sanitized_url}")

    async def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        # Importing the models registers their tables on Base.metadata
        import wagerboard.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def drop_all(self) -> None:
        import wagerboard.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def close(self) -> None:
        """Dispose of the engine and release pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self._shared_connection_lock = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Scoped session without an explicit transaction.

        Ensures:
        - Rollback on error
        - Session is closed and its connection returned to the pool
        - Sessions on a shared in-memory connection run one at a time
        """
        if self._session_factory is None:
            raise RuntimeError("Database not initialized. Call connect() first.")

        async with self._exclusive():
            session = self._session_factory()
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    def _exclusive(self):
        # A rollback on the shared connection would undo every open session's work
        if self._shared_connection_lock is None:
            return nullcontext()
        return self._shared_connection_lock

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Transaction boundary for one ledger operation.

        Commits when the block exits normally. Any exception, including
        task cancellation, rolls the whole block back.
        """
        async with self.session() as session:
            async with session.begin():
                yield session

    async def check_connection(self) -> bool:
        """Check if the database answers a trivial query."""
        if self._engine is None:
            return False

        try:
            async with self._exclusive():
                async with self._engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database health check failed: {e}")
            return False

    @property
    def sanitized_url(self) -> str:
        return _sanitize_database_url(self.url)


def _sanitize_database_url(url: str) -> str:
    """
    Hide password in a database URL for safe logging.
    """
    if "@" not in url or "://" not in url:
        return url

    protocol, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" in credentials:
        username = credentials.split(":", 1)[0]
        return f"{protocol}://{username}:***@{host}"
    return url
