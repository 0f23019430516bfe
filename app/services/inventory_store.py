# app/services/inventory_store.py
"""
Persistence for inventory items.

Every write is a single-row read-then-write committed on its own, so a
crash part-way through a sync leaves earlier rows committed. Upserts keyed on
wholecell_id never include photos or listing in the write set of an
existing row.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.inventory_item import InventoryItem, utc_now

logger = logging.getLogger(__name__)


class InventoryStore:
    """Inventory item access for routes, collaborators and the WholeCell sync."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self) -> List[InventoryItem]:
        result = await self.db.execute(select(InventoryItem).order_by(InventoryItem.created_at.desc()))
        return list(result.scalars().all())

    async def get(self, item_id: str) -> Optional[InventoryItem]:
        return await self.db.get(InventoryItem, item_id)

    async def get_many(self, item_ids: List[str]) -> List[InventoryItem]:
        if not item_ids:
            return []
        result = await self.db.execute(select(InventoryItem).where(InventoryItem.id.in_(item_ids)))
        return list(result.scalars().all())

    async def get_by_vendor_id(self, wholecell_id: int) -> Optional[InventoryItem]:
        result = await self.db.execute(
            select(InventoryItem).where(InventoryItem.wholecell_id == wholecell_id)
        )
        return result.scalar_one_or_none()

    async def create(self, fields: Dict[str, Any]) -> InventoryItem:
        """Insert a manually entered item (no wholecell_id)."""
        now = utc_now()
        values = dict(fields)
        values.setdefault("photos", [])
        values.setdefault("created_at", now)
        values["last_updated"] = now
        item = InventoryItem(**values)
        return await self._commit(item)

    async def update(self, item_id: str, fields: Dict[str, Any]) -> Optional[InventoryItem]:
        """Apply a partial update and refresh last_updated. Returns None for unknown ids."""
        item = await self.get(item_id)
        if item is None:
            return None
        for key, value in fields.items():
            setattr(item, key, value)
        item.last_updated = utc_now()
        return await self._commit(item)

    async def upsert(self, wholecell_id: int, fields: Dict[str, Any]) -> InventoryItem:
        """
        Insert or update the item linked to a WholeCell record.

        Existing rows get the sync fields refreshed (created_at only when it
        was never set); photos and listing are left as they are. New rows start
        with no photos and no listing.
        """
        existing = await self.get_by_vendor_id(wholecell_id)
        now = utc_now()

        if existing is not None:
            for key in InventoryItem.SYNC_FIELDS:
                if key in fields:
                    setattr(existing, key, fields[key])
            if existing.created_at is None and fields.get("created_at") is not None:
                existing.created_at = fields["created_at"]
            existing.last_updated = now
            return await self._commit(existing)

        values = {key: fields[key] for key in InventoryItem.SYNC_FIELDS if key in fields}
        item = InventoryItem(
            wholecell_id=wholecell_id,
            photos=[],
            listing=None,
            created_at=fields.get("created_at") or now,
            last_updated=now,
            **values,
        )
        return await self._commit(item)

    async def delete(self, item_id: str) -> bool:
        item = await self.get(item_id)
        if item is None:
            return False
        try:
            await self.db.delete(item)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return True

    async def _commit(self, item: InventoryItem) -> InventoryItem:
        try:
            self.db.add(item)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(item)
        return item
