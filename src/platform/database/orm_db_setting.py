"""
SQLAlchemy async engine and session management

This module provides:
1. Base: declarative base shared by every ORM model
2. Database: owns one AsyncEngine + async_sessionmaker and hands out sessions
3. create_db_and_tables: schema bootstrap used at startup and in tests

PostgreSQL (asyncpg) is the deployment target. SQLite (aiosqlite) is supported
for the integration test suite; it gets a busy timeout so concurrent writers
queue on the database lock instead of failing.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import Settings, settings as default_settings
from src.platform.logging.loguru_io import Logger


class Base(DeclarativeBase):
    pass


class Database:
    def __init__(
        self, *, database_url: Optional[str] = None, config: Optional[Settings] = None
    ) -> None:
        self._config = config or default_settings
        self._url = database_url or self._config.DATABASE_URL_ASYNC
        self._engine: AsyncEngine = create_async_engine(self._url, **self._engine_kwargs())
        self._session_maker = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def _engine_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {'echo': self._config.DB_ECHO, 'future': True}
        if self._url.startswith('sqlite'):
            kwargs['connect_args'] = {'timeout': 30}
            return kwargs
        kwargs.update(
            pool_size=self._config.DB_POOL_SIZE,
            max_overflow=self._config.DB_POOL_MAX_OVERFLOW,
            pool_timeout=self._config.DB_POOL_TIMEOUT,
            pool_recycle=self._config.DB_POOL_RECYCLE,
            pool_pre_ping=self._config.DB_POOL_PRE_PING,
        )
        return kwargs

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        return self._session_maker

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        session = self._session_maker()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_tables(self) -> None:
        # Importing the models registers them on Base.metadata
        import src.service.ticketing.driven_adapter.model  # noqa: F401

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        Logger.base.info('🗄️ [DB] Tables ensured')

    async def drop_tables(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self._engine.dispose()
        Logger.base.info('🔌 [DB] Engine disposed')


async def create_db_and_tables(database: Database) -> None:
    """Create database tables if they don't exist"""
    try:
        await database.create_tables()
    except Exception as e:
        error_msg = str(e).lower()
        if any(keyword in error_msg for keyword in ['already exists', 'duplicate key']):
            Logger.base.info('Tables already exist, skipping creation')
        else:
            raise
