# tests/conftest.py
import asyncio
import os

# The app builds its engine at import time; point it at SQLite before importing
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, clear_settings_cache, get_settings
from app.database import Base
from app.dependencies import get_db, get_session_factory, get_wholecell_client
from app.main import app
from app.routes import sync as sync_routes
from app import models  # noqa: F401  registers tables on Base.metadata

from tests.mocks.mock_wholecell import FakeWholeCellClient, wholecell_record

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
def settings():
    """Provide test settings"""
    return Settings(
        DATABASE_URL=TEST_DATABASE_URL,
        WHOLECELL_APP_KEY="test_key",
        WHOLECELL_APP_SECRET="test_secret",
        WHOLECELL_STATUS_FILTER="Needs eBay Draft",
        SYNC_PRESERVE_LOCAL_STATUS=False,
    )


@pytest.fixture(autouse=True)
def reset_settings_cache():
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(scope="function")
async def test_engine():
    """In-memory SQLite engine shared by every session in one test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Provide a database session for tests"""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_wholecell():
    return FakeWholeCellClient()


@pytest.fixture
async def api_client(session_factory, settings, fake_wholecell):
    """ASGI client with the database, settings and WholeCell client overridden."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_wholecell_client] = lambda: fake_wholecell

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    # Let a sync started by the test finish before its database goes away
    task = sync_routes._active_sync_task
    if task is not None and not task.done():
        await asyncio.gather(task, return_exceptions=True)
    sync_routes._active_sync_task = None
    app.dependency_overrides.clear()


@pytest.fixture
def make_record():
    return wholecell_record
