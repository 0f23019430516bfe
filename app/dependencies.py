from typing import AsyncGenerator
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import Settings, get_settings
from app.database import async_session
from app.services.wholecell.client import WholeCellClient


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()


def get_session_factory() -> async_sessionmaker:
    """Session factory for work that outlives the request (background sync runs)."""
    return async_session


def get_wholecell_client(settings: Settings = Depends(get_settings)) -> WholeCellClient:
    """WholeCell client built from settings. Credentials are checked on first request."""
    return WholeCellClient.from_settings(settings)
