"""
Async document store: one engine per process, one AsyncSession per unit of work.

SQLite (aiosqlite) is the default backend. An in-memory URL is pinned to a
single shared connection so every session sees the same tables.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> Dict[str, Any]:
    url = make_url(database_url)
    options: Dict[str, Any] = {"echo": False}
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool
        options["connect_args"] = {"check_same_thread": False}
    return options


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # pragma: no cover
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


class DatabaseManager:
    """Owns the engine and session factory for one database URL."""

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self.engine: Optional[AsyncEngine] = None
        self._factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def init(self) -> None:
        if self.engine is not None:
            return
        self.engine = create_async_engine(self.database_url, **_engine_options(self.database_url))
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._factory = async_sessionmaker(self.engine, expire_on_commit=False)
        logger.info("Database engine ready (%s)", self.engine.dialect.name)

    async def create_schema(self) -> None:
        """Create missing tables for every model."""
        import models  # noqa: F401

        from models.base import Base

        if self.engine is None:
            raise RuntimeError("Database is not initialized.")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Schema ensured: %s", ", ".join(sorted(Base.metadata.tables)))

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """One unit of work: committed when the block exits cleanly, rolled back otherwise."""
        if self._factory is None:
            raise RuntimeError("Database is not initialized.")
        async with self._factory() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self._factory = None
        logger.info("Database engine disposed")


_manager: Optional[DatabaseManager] = None


async def init_database(database_url: str, *, create_schema: bool = False) -> DatabaseManager:
    """Initialize the process-wide manager (idempotent) and optionally create tables."""
    global _manager
    if _manager is None:
        _manager = DatabaseManager(database_url)
    await _manager.init()
    if create_schema:
        await _manager.create_schema()
    return _manager


async def dispose_database() -> None:
    global _manager
    if _manager is not None:
        await _manager.dispose()
        _manager = None


def get_database_manager() -> DatabaseManager:
    if _manager is None:
        raise RuntimeError("Database is not initialized.")
    return _manager
