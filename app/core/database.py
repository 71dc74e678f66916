"""
Database configuration and session management
"""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config import settings
from app.core.errors import CatalogError, StorageError
from app.core.logging import get_logger

logger = get_logger(__name__)


def _connect_args(url: str) -> dict[str, Any]:
    """Per-connection options; PostgreSQL gets a server-side statement timeout."""
    if url.startswith("postgresql+asyncpg"):
        return {"server_settings": {"statement_timeout": str(settings.DB_STATEMENT_TIMEOUT_MS)}}
    return {}


def _engine_options(url: str) -> dict[str, Any]:
    """Pool options; SQLite (local runs, tests) keeps the driver's default pool."""
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_pre_ping": True,  # Verify connections before using
        "pool_recycle": 3600,
    }


# Create async engine
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    connect_args=_connect_args(settings.DATABASE_URL),
    **_engine_options(settings.DATABASE_URL),
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting async database sessions.

    The session (and its pooled connection) is released when the request
    finishes, whether the handler returned or raised.

    Usage in FastAPI:
        @router.get("/items")
        async def read_items(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Item))
            return result.scalars().all()
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_async_session() -> AsyncSession:
    """
    Get a standalone async database session for scripts.

    This is a context manager that should be used with 'async with':
        async with get_async_session() as db:
            await db.execute(...)
            await db.commit()

    Note: Caller is responsible for committing/rolling back.
    """
    return AsyncSessionLocal()


@asynccontextmanager
async def atomic(db: AsyncSession, operation: str) -> AsyncIterator[AsyncSession]:
    """
    Run a multi-statement operation as one transaction.

    Commits on normal exit. Any failure rolls back every write made inside the
    block: domain errors are re-raised as they are, database errors are logged
    and surfaced as StorageError.

    Args:
        db: Database session
        operation: Short name used in log events (e.g. "create_review")
    """
    try:
        yield db
        await db.commit()
    except CatalogError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("transaction_failed", operation=operation, error=str(e), exc_info=True)
        raise StorageError(f"Failed to {operation.replace('_', ' ')}") from e
