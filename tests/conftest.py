"""
Pytest configuration and shared fixtures.

This file provides common fixtures for all tests.
"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from app import models  # noqa: F401  (registers every table on SQLModel.metadata)
from app.core.database import get_db
from app.core.genre_cache import GenreListCache, get_genre_cache
from app.main import app as main_app
from app.models.archived_review import ArchivedReviews

# Load .env file at module import time to make TEST_DATABASE_URL available
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def _get_test_database_url(tmp_path: Path) -> str:
    """
    Test database URL.

    TEST_DATABASE_URL selects a dedicated database (e.g. PostgreSQL to exercise
    TEXT[]/JSONB and advisory locks). Without it each test gets its own SQLite
    file through aiosqlite.
    """
    return os.getenv("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture(scope="function")
async def engine(tmp_path: Path):
    """
    Create test database engine for each test function.

    Scope is "function" (not "session") to ensure the async engine runs in the same
    event loop as the function-scoped db_session fixture. Tables are created from
    SQLModel.metadata before the test and dropped afterwards.
    """
    url = _get_test_database_url(tmp_path)
    test_engine = create_async_engine(url, echo=False)

    if test_engine.dialect.name == "sqlite":

        @event.listens_for(test_engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a new database session for each test.

    Configured like the application's session factory: no expiry on commit and
    no autoflush, so services see the same session behavior as in production.
    """
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session

        # Cleanup - rollback any changes left uncommitted by the test
        await session.rollback()


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="function")
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="function")
def genre_cache(clock: FakeClock) -> GenreListCache:
    """Genre cache driven by the test clock, 60 second TTL."""
    return GenreListCache(ttl_seconds=60, clock=clock)


@pytest.fixture(scope="function")
def app(db_session: AsyncSession, genre_cache: GenreListCache) -> FastAPI:
    """
    Create FastAPI app with test database session.

    This overrides the database and genre cache dependencies.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    main_app.dependency_overrides[get_db] = override_get_db
    main_app.dependency_overrides[get_genre_cache] = lambda: genre_cache

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async HTTP client for testing API endpoints.

    Usage:
        async def test_endpoint(client):
            response = await client.get("/api/reviews")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def archive_snapshot(db_session: AsyncSession):
    """
    Factory inserting an archived snapshot directly, bypassing the write path.

    Usage:
        async def test_materialize(archive_snapshot):
            archived = await archive_snapshot({"game_name": "G1", "rating": 8})
    """

    async def _create(review_json: dict[str, Any]) -> ArchivedReviews:
        archived = ArchivedReviews(review_json=review_json)
        db_session.add(archived)
        await db_session.commit()
        return archived

    return _create


# =============================================================================
# Sample Data Dictionaries (for API request payloads)
# =============================================================================


@pytest.fixture
def sample_review_data():
    """
    Sample review submission for API tests.

    Returns a dictionary that can be posted to /api/reviews.
    """
    return {
        "title": "A perfect loop",
        "game_name": "Hades",
        "review_text": "Every run teaches you something.",
        "rating": 9,
        "positive_points": ["Combat", "Writing"],
        "negative_points": ["Late-game grind"],
        "tags": ["roguelike", " action ", "", "roguelike"],
    }
