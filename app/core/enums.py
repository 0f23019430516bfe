"""
Shared enums and constants used across the application.
"""

from enum import Enum


class ItemStatus(str, Enum):
    """Lifecycle of an inventory item, in forward order."""
    NEW = "new"
    PHOTOS_COMPLETED = "photos_completed"
    LISTING_GENERATED = "listing_generated"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = [ItemStatus.NEW, ItemStatus.PHOTOS_COMPLETED, ItemStatus.LISTING_GENERATED]


class SyncEventType(str, Enum):
    PROGRESS = "progress"
    COMPLETE = "complete"
    ERROR = "error"


class SyncRunStatus(str, Enum):
    SUCCESS = "success"   # zero item errors, checkpoint advanced
    PARTIAL = "partial"   # some item errors, checkpoint frozen
    ERROR = "error"       # run aborted by the vendor client


# Sync metadata keys
WHOLECELL_CHECKPOINT_KEY = "wholecell_last_sync"
WHOLECELL_SOURCE = "wholecell"
