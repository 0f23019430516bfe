# app/services/item_service.py
"""
Operations the dashboard performs on a single inventory item.

These are the only writers of photos and listing. Each one applies the
status lifecycle so an item only ever moves forward.
"""

import logging
from typing import Any, Dict, List, Optional

from app.core.enums import ItemStatus
from app.core.exceptions import ItemNotFoundError
from app.models.inventory_item import InventoryItem
from app.services.inventory_store import InventoryStore
from app.services.listing_generator import generate_listing
from app.services.status_lifecycle import status_after_listing, status_after_photos

logger = logging.getLogger(__name__)


class ItemService:

    def __init__(self, store: InventoryStore):
        self.store = store

    async def _require(self, item_id: str) -> InventoryItem:
        item = await self.store.get(item_id)
        if item is None:
            raise ItemNotFoundError(f"Inventory item {item_id} not found")
        return item

    async def set_photos(self, item_id: str, photos: List[str]) -> InventoryItem:
        """Replace the ordered photo list; the first photo completes the photo step."""
        item = await self._require(item_id)
        status = status_after_photos(ItemStatus(item.status), photos)
        logger.info(f"Item {item_id}: {len(photos)} photos, status {item.status} -> {status.value}")
        return await self.store.update(item_id, {"photos": list(photos), "status": status.value})

    async def save_listing(self, item_id: str, listing: Dict[str, Any]) -> InventoryItem:
        """Store an edited listing and mark the item listing_generated."""
        item = await self._require(item_id)
        status = status_after_listing(ItemStatus(item.status))
        return await self.store.update(item_id, {"listing": dict(listing), "status": status.value})

    async def generate_listing(
        self,
        item_id: str,
        price: Optional[float] = None,
        category: Optional[str] = None,
    ) -> InventoryItem:
        """Build a template listing from the item's details and save it."""
        item = await self._require(item_id)
        if price is None:
            price = item.sale_price
        listing = generate_listing(item.name, item.condition, item.details or {}, price, category)
        return await self.save_listing(item_id, listing)

    async def toggle_listed(self, item_id: str) -> InventoryItem:
        item = await self._require(item_id)
        return await self.store.update(item_id, {"listed": not item.listed})

    async def apply_patch(self, item_id: str, changes: Dict[str, Any]) -> InventoryItem:
        """
        Partial update from the dashboard.

        Photo and listing changes go through the lifecycle rules; an explicit
        status in the same patch is honoured as long as it is not behind the
        status those rules produce.
        """
        item = await self._require(item_id)
        changes = dict(changes)
        current = ItemStatus(changes.get("status") or item.status)

        if "photos" in changes and changes["photos"] is not None:
            current = status_after_photos(current, changes["photos"])
        if changes.get("listing"):
            current = status_after_listing(current)

        if "photos" in changes or "listing" in changes or "status" in changes:
            changes["status"] = current.value
        return await self.store.update(item_id, changes)
