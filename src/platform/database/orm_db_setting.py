"""
SQLAlchemy async engine and session management

This module provides:
1. AsyncEngineManager: builds the engine lazily and rebuilds it when the event loop changes
2. Base: declarative base for the ORM models
3. Database: DI-friendly handle owning one engine manager (session, create_tables, dispose)

SQLite URLs (local runs, tests) get NullPool; every other URL gets a sized pool
configured from settings.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger


class Base(DeclarativeBase):
    pass


class AsyncEngineManager:
    """
    Keeps engines bound to the running event loop to avoid
    "Task got Future attached to a different loop" errors (test clients and
    CLI scripts each run their own loop).
    """

    def __init__(self, *, settings: Settings) -> None:
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url(self) -> str:
        return self._settings.DATABASE_URL_ASYNC

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._engine is None:
                self._engine = self._create_engine()
            return self._engine

        if self._loop is not current_loop:
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, rebuilding engine...')
            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = self._create_engine()
            self._session_maker = None
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
            return create_async_engine(self.url, echo=False, poolclass=NullPool)
        return create_async_engine(
            self.url,
            echo=False,
            pool_size=self._settings.DB_POOL_SIZE,
            max_overflow=self._settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=self._settings.DB_POOL_TIMEOUT,
            pool_recycle=self._settings.DB_POOL_RECYCLE,
            pool_pre_ping=self._settings.DB_POOL_PRE_PING,
        )


class Database:
    def __init__(self, *, settings: Settings) -> None:
        self._engine_manager = AsyncEngineManager(settings=settings)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session context; rolls back on exception, closes on exit."""
        session_maker = self._engine_manager.get_session_maker()
        async with session_maker() as session:
            yield session

    async def create_tables(self) -> None:
        engine = self._engine_manager.get_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        Logger.base.info('🗄️  [DB] Tables ensured')

    async def dispose(self) -> None:
        await self._engine_manager.dispose()
