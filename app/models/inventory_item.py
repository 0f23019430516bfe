# app/models/inventory_item.py
"""
Inventory items pulled from WholeCell or entered by hand.

Rows with a wholecell_id are kept current by the WholeCell sync; photos and
listing belong to the photo manager and listing generator and are never
written by the sync.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Float, Boolean, JSON
from sqlalchemy.dialects.postgresql import JSONB

from app.core.enums import ItemStatus
from app.database import Base, UTCDateTime

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _new_item_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(String, primary_key=True, default=_new_item_id)
    wholecell_id = Column(Integer, unique=True, nullable=True, index=True)

    # Descriptive fields
    name = Column(String, nullable=False)
    sku = Column(String, nullable=False)
    condition = Column(String, nullable=False)
    status = Column(String, nullable=False, default=ItemStatus.NEW.value, index=True)
    listed = Column(Boolean, nullable=False, default=False)
    details = Column(JSONType, nullable=False, default=dict)

    # Locally owned
    photos = Column(JSONType, nullable=False, default=list)
    listing = Column(JSONType, nullable=True)

    # Pass-through financial / logistics
    sale_price = Column(Float, nullable=True)
    total_price_paid = Column(Float, nullable=True, default=0.0)
    warehouse = Column(String, nullable=True)
    location = Column(String, nullable=True)

    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    last_updated = Column(UTCDateTime, nullable=False, default=utc_now)

    # Fields the WholeCell sync refreshes on every run
    SYNC_FIELDS = (
        "name", "sku", "condition", "status", "listed", "details",
        "sale_price", "total_price_paid", "warehouse", "location",
    )

    def __repr__(self):
        return f"<InventoryItem(id='{self.id}', wholecell_id={self.wholecell_id}, sku='{self.sku}', status='{self.status}')>"
