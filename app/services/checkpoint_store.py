import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.sync_metadata import SyncMetadata

logger = logging.getLogger(__name__)


class CheckpointStore:
    """Durable key/value checkpoints backed by the sync_metadata table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: str) -> Optional[str]:
        row = await self.db.get(SyncMetadata, key)
        return row.value if row is not None else None

    async def set(self, key: str, value: str) -> None:
        try:
            row = await self.db.get(SyncMetadata, key)
            if row is None:
                self.db.add(SyncMetadata(key=key, value=value))
            else:
                row.value = value
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.debug(f"Checkpoint {key} set to {value}")
