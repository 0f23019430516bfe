from .inventory_item import InventoryItem
from .sync_metadata import SyncMetadata
from .sync_run import SyncRun

# This ensures all models are registered with SQLAlchemy
__all__ = [
    'InventoryItem',
    'SyncMetadata',
    'SyncRun',
]
