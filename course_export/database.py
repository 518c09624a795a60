"""
Database access for the export service.

Course structure, content records and stored archives share one PostgreSQL
database. The app talks to it through a single async engine (asyncpg);
Alembic migrations use a separate synchronous URL.

Pool sizing is tuned for a mostly idle API plus one batch runner that moves
archive blobs around:
    DB_POOL_SIZE       (default 5)
    DB_MAX_OVERFLOW    (default 10)
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from .tables import metadata  # noqa: F401 - exported for Alembic

logger = logging.getLogger(__name__)

_ASYNC_SCHEME = "postgresql+asyncpg://"
_PLAIN_SCHEME = "postgresql://"

_engine: AsyncEngine | None = None


def is_configured() -> bool:
    """Check if DATABASE_URL is set."""
    return bool(os.environ.get("DATABASE_URL"))


def _database_url(async_driver: bool) -> str:
    url = os.environ.get("DATABASE_URL", "")
    if not url:
        raise ValueError("DATABASE_URL environment variable must be set")

    if url.startswith(_ASYNC_SCHEME):
        return url if async_driver else _PLAIN_SCHEME + url[len(_ASYNC_SCHEME):]
    if url.startswith(_PLAIN_SCHEME):
        return _ASYNC_SCHEME + url[len(_PLAIN_SCHEME):] if async_driver else url
    raise ValueError("DATABASE_URL must be a postgresql:// URL")


def get_sync_database_url() -> str:
    """psycopg2 URL for Alembic."""
    return _database_url(async_driver=False)


def get_engine() -> AsyncEngine:
    """Get or create the async engine singleton."""
    global _engine
    if _engine is None:
        _engine = create_async_engine(
            _database_url(async_driver=True),
            echo=os.environ.get("SQL_ECHO", "").lower() == "true",
            pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
            max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
            pool_timeout=30,
            # Batches run minutes apart; drop connections the server closed meanwhile
            pool_pre_ping=True,
            pool_recycle=1800,
        )
    return _engine


@asynccontextmanager
async def get_connection() -> AsyncGenerator[AsyncConnection, None]:
    """
    Read-only style access: nothing is committed.

    Usage:
        async with get_connection() as conn:
            rows = await get_course_sections(conn, course_id)
    """
    async with get_engine().connect() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncGenerator[AsyncConnection, None]:
    """
    Connection inside a transaction: commits on exit, rolls back on error.

    Archive replacement relies on this so readers never see a course
    without an archive.
    """
    async with get_engine().begin() as conn:
        yield conn


async def check_database() -> bool:
    """True if the database answers a trivial query. Used by /health."""
    if not is_configured():
        return False
    try:
        async with get_connection() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Database health check failed: {e}")
        return False
    return True


async def close_engine() -> None:
    """Dispose of the engine and its pool. Call on shutdown."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
