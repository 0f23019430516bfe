"""
Schema exports for the application.
"""

# Base schemas
from .base import BaseSchema

# Inventory schemas
from .inventory import (
    ItemDetails,
    ListingPayload,
    InventoryItemCreate,
    InventoryItemUpdate,
    InventoryItemRead,
    PhotosUpdate,
    ListingGenerateRequest,
)

# Sync schemas
from .sync import (
    SyncProgressEvent,
    SyncCompleteEvent,
    SyncErrorEvent,
    SyncRunRead,
    SyncStatusRead,
)
