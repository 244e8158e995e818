"""
Database Engine Configuration for FastAPI.

SQLite (aiosqlite) is the default store; any async SQLAlchemy URL works.
For SQLite:
- WAL mode so reads don't block the single writer
- busy_timeout instead of immediate "database is locked" failures
- Foreign key enforcement
"""

import logging
from typing import AsyncGenerator
from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from dashboard_api.core.config import config as settings
from dashboard_api.core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


def _get_engine_options(database_url: str) -> dict:
    """
    Get engine options based on database type.
    SQLite requires special handling for async and concurrency.
    """
    is_sqlite = database_url.startswith("sqlite")

    options = {
        "echo": False,
        "future": True,
    }

    if is_sqlite:
        # aiosqlite doesn't pool; in-memory databases must share one connection
        if ":memory:" in database_url:
            options["poolclass"] = StaticPool
            options["connect_args"] = {"check_same_thread": False}
        else:
            options["poolclass"] = NullPool
    elif not settings.is_production:
        options["poolclass"] = NullPool

    return options


def _configure_sqlite_connection(dbapi_connection, connection_record):
    """
    Configure SQLite connection on every new connection to the database.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=30000")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()


database_url = settings.database_url

engine = create_async_engine(database_url, **_get_engine_options(database_url))

if database_url.startswith("sqlite"):
    # For aiosqlite, we need to use the sync_engine's pool events
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        _configure_sqlite_connection(dbapi_connection, connection_record)


AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db_util() -> AsyncGenerator[AsyncSession, None]:
    """
    Database dependency for FastAPI: one session per request.
    Commits when the handler returns, rolls back on any exception.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.error(f"Database error, transaction rolled back: {exc}")
            raise DatabaseError() from exc
        except Exception:
            await session.rollback()
            raise


async def create_all_tables() -> None:
    """Create any missing tables from the model metadata."""
    from dashboard_api.core.db.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables are in place")


async def check_database_connection() -> bool:
    """
    Verify database connection is working.
    Used by the readiness endpoint.
    """
    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(text("SELECT 1"))
            return result.scalar() == 1
    except Exception as exc:
        logger.warning(f"Database check failed: {exc}")
        return False
