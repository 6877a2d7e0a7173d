"""
SQLAlchemy async engine and session management

This module provides:
1. AsyncEngineManager: keeps one engine per running event loop
2. Base: declarative base for every ORM model
3. Database class (for dependency injection)
"""

import asyncio
from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


class AsyncEngineManager:
    """
    Manages the SQLAlchemy async engine with event loop awareness.

    Ensures the engine is always bound to the current event loop to prevent
    "Task got Future attached to a different loop" errors.
    """

    def __init__(self, *, url: Optional[str] = None) -> None:
        self._url = url
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url(self) -> str:
        return self._url or settings.DATABASE_URL_ASYNC

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._engine is None:
                self._engine = self._create_engine()
            return self._engine

        if self._loop is not current_loop:
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, recreating engine')
                self._session_maker = None
            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = self._create_engine()
            self._loop = current_loop

        return self._engine  # type: ignore[return-value]

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_maker = None
        self._loop = None

    def _create_engine(self) -> AsyncEngine:
        if self.url.startswith('sqlite'):
            return _create_sqlite_engine(self.url)

        return create_async_engine(
            self.url,
            echo=False,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
        )


def _create_sqlite_engine(url: str) -> AsyncEngine:
    """
    SQLite (local runs and tests): every transaction starts with BEGIN IMMEDIATE.

    The write lock is taken up front, so a second writer waits for the first
    one to commit instead of failing while upgrading a read lock.
    """
    engine = create_async_engine(url, echo=False, poolclass=NullPool)

    @event.listens_for(engine.sync_engine, 'connect')
    def _disable_driver_transactions(dbapi_connection: Any, _connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, 'begin')
    def _begin_immediate(conn: Any) -> None:
        conn.exec_driver_sql('BEGIN IMMEDIATE')

    return engine


class Base(DeclarativeBase):
    pass


class Database:
    """Owns the engine manager handed to units of work through the DI container."""

    def __init__(self, *, url: Optional[str] = None) -> None:
        self._engine_manager = AsyncEngineManager(url=url)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine_manager.get_engine()

    def new_session(self) -> AsyncSession:
        return self._engine_manager.get_session_maker()()

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        Logger.base.info('🗄️ [DB] Tables ensured')

    async def dispose(self) -> None:
        await self._engine_manager.dispose()
