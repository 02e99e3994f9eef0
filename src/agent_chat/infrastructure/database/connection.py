# src/agent_chat/infrastructure/database/connection.py
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine, AsyncEngine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from agent_chat.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    """
    Owns the async engine for the chat tables and hands out sessions.

    One instance is connected in the application lifespan and reached by
    request handlers through ``app.state.db``. The streaming path opens
    its own session from the same manager after the request session has
    committed the user's message.

    Usage:
        db = DatabaseManager()
        await db.connect(url="postgresql+asyncpg://...", pool_size=5)
        async with db.session() as session:
            ...
        await db.disconnect()
    """

    def __init__(self):
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    async def connect(
        self,
        url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True,
        echo_sql: bool = False,
    ) -> None:
        """
        Create the engine. SQLite URLs get a NullPool and ignore the
        pool sizing arguments.

        Raises:
            RuntimeError: If already connected
        """
        if self._engine is not None:
            raise RuntimeError("Database already connected")

        if url.startswith("sqlite"):
            self._engine = create_async_engine(url, poolclass=NullPool, echo=echo_sql)
        else:
            self._engine = create_async_engine(
                url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
                pool_pre_ping=pool_pre_ping,
                echo=echo_sql,
            )

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        logger.info("Database connected", dialect=self._engine.dialect.name)

    async def create_tables(self) -> None:
        """
        Create any missing tables from the SQLModel metadata.

        For local SQLite databases and tests; deployed databases are
        migrated with Alembic.
        """
        if not self._engine:
            raise RuntimeError("Database not connected")

        # Registers every table on SQLModel.metadata
        from agent_chat.infrastructure.database import models  # noqa: F401

        async with self._engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables ensured", tables=sorted(SQLModel.metadata.tables))

    async def disconnect(self) -> None:
        """Dispose of the engine. Safe to call multiple times."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database disconnected")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session that commits on success and rolls back on any exception.

        Raises:
            RuntimeError: If database not connected
        """
        if not self._session_factory:
            raise RuntimeError("Database not connected. Call connect() first.")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def health_check(self) -> bool:
        """Run ``SELECT 1``; False when disconnected or the query fails."""
        if not self._engine:
            return False

        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error("Database health check failed", error=str(e))
            return False

    @property
    def engine(self) -> AsyncEngine | None:
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._engine is not None


db = DatabaseManager()
