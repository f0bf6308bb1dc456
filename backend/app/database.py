"""
Quill Backend — Database Engine Handle
=======================================

What:  Async SQLAlchemy engine, session factory, and transactional session scope.
Why:   The connection pool is the only resource shared between requests; it is
       opened once at startup and disposed once at shutdown.
How:   Database wraps create_async_engine() and async_sessionmaker(). The app
       lifespan owns the instance and hands it to the SQL post store; nothing
       imports a module-level engine.
Who:   Constructed by app.dependencies.create_post_store(); used by
       SQLAlchemyPostStore and the Alembic environment.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite (aiosqlite) manages its own pool, so the sizing arguments are
    only passed to server databases.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every model on one shared metadata object, which Alembic reads
    for --autogenerate and Database.create_tables() uses for dev setups.
    """
    pass


def engine_options(
    database_url: str,
    pool_size: int = 20,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    echo: bool = False,
) -> Dict[str, Any]:
    """Builds create_async_engine() keyword arguments for the given URL."""
    options: Dict[str, Any] = {"echo": echo, "pool_pre_ping": pool_pre_ping}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_recycle=3600,
        )
    return options


class Database:
    """
    Owns one async engine and the session factory bound to it.

    Lifecycle:
        db = Database(url, **engine_options(url))   # at startup
        async with db.session() as session: ...     # per store operation
        await db.dispose()                          # at shutdown
    """

    def __init__(self, database_url: str, **options: Any):
        self.url = database_url
        self.engine: AsyncEngine = create_async_engine(database_url, **options)
        # expire_on_commit=False: ORM objects stay readable after commit,
        # so stores can build responses once the transaction is closed
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Transactional scope around a single unit of work.

        How it works:
            1. Creates a new session from the factory
            2. Yields it to the caller
            3. On success: commits
            4. On error: rolls back and re-raises
            5. Always: closes the session (returns connection to pool)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def create_tables(self) -> None:
        """Creates every table registered on Base.metadata (idempotent)."""
        # Model modules must be imported for their tables to be registered
        from app.models import post  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def ping(self) -> bool:
        """Runs SELECT 1; returns False instead of raising when unreachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def dispose(self) -> None:
        """Closes all pooled connections."""
        await self.engine.dispose()
