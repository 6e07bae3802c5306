"""
GymCMS Backend — Database Handle & Session Management
=======================================================

What:  An explicitly constructed store handle wrapping the async SQLAlchemy
       engine and session factory, plus the declarative Base for all models.
Why:   The handle is created by the process entry point (FastAPI lifespan or
       a function handler) and passed down, so tests and both deployment
       shapes can each own their own store.
How:   Database.open() builds the engine; Database.session() yields a session
       that commits on success and rolls back on error; Database.close()
       disposes the pool.

Backends:
    sqlite+aiosqlite  embedded store (default). Foreign keys are switched on
                      per connection so album deletion cascades to images.
    postgresql+asyncpg  remote store. Pool options come from settings.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from gymcms.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object used by create_all() and Alembic.
    """
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Store handle with an explicit open/close lifecycle.

    Example:
        db = Database("sqlite+aiosqlite:///:memory:")
        await db.open()
        async with db.session() as session:
            ...
        await db.close()
    """

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self.url = url or settings.database_url
        self.echo = settings.log_level == "DEBUG" if echo is None else echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def _engine_options(self) -> dict:
        url = make_url(self.url)
        options: dict = {"echo": self.echo}
        if url.get_backend_name() == "sqlite":
            # In-memory databases live on a single connection
            if url.database in (None, "", ":memory:"):
                options["poolclass"] = StaticPool
                options["connect_args"] = {"check_same_thread": False}
        else:
            options.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
        return options

    async def open(self) -> None:
        if self._engine is not None:
            return
        engine = create_async_engine(self.url, **self._engine_options())
        if engine.dialect.name == "sqlite":
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._engine = engine
        # expire_on_commit=False: attributes stay readable after commit
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("Database opened (%s)", engine.dialect.name)

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database closed")

    async def create_all(self) -> None:
        """Create any missing tables from the model metadata."""
        # Importing the models package registers every table on Base.metadata
        import gymcms.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide a session scoped to one unit of work.

        How it works:
            1. Creates a new session from the factory
            2. Yields it to the caller
            3. On success: commits the transaction
            4. On error: rolls back and re-raises
            5. Always: closes the session
        """
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()
