"""Async engine and per-request sessions for SQLite and PostgreSQL."""

from __future__ import annotations

from typing import Any, AsyncGenerator, Dict

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

logger = structlog.get_logger(__name__)


def _engine_options(database_url: str, echo: bool, pool_size: int, max_overflow: int) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": echo}
    if database_url.startswith("sqlite"):
        # One shared connection keeps an in-memory database alive across sessions
        if ":memory:" in database_url:
            options["poolclass"] = StaticPool
        return options
    options.update(
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_recycle=1800,
        pool_pre_ping=True,
    )
    return options


class DatabaseManager:
    """Owns the engine and hands out sessions.

    The engine is created lazily so importing the app never opens a
    connection.
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
    ):
        self.database_url = database_url
        self._options = _engine_options(database_url, echo, pool_size, max_overflow)
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(self.database_url, **self._options)
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(self.engine, expire_on_commit=False)
        return self._session_factory

    async def create_tables(self) -> None:
        """Create every SQLModel table; used for SQLite and debug runs."""
        from . import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def drop_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)

    async def health_check(self) -> bool:
        """Return True when ``SELECT 1`` succeeds."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            logger.error("database_health_check_failed", error=str(exc))
            return False
        return True

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None

    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that commits on success and rolls back on error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


_db_manager: DatabaseManager | None = None


def init_db(database_url: str, echo: bool = False) -> DatabaseManager:
    """Create the process-wide database manager."""
    global _db_manager
    _db_manager = DatabaseManager(database_url, echo=echo)
    return _db_manager


def get_db_manager() -> DatabaseManager:
    if _db_manager is None:
        raise RuntimeError("Database manager not initialized. Call init_db() first.")
    return _db_manager


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency providing a request-scoped session."""
    async for session in get_db_manager().get_session():
        yield session
