"""
Core module exports.
"""
from .enums import (
    ItemStatus,
    SyncEventType,
    SyncRunStatus,
)

from .exceptions import (
    BaseServiceError,
    PlatformServiceError,
    WholeCellServiceError,
    WholeCellConfigError,
    WholeCellAPIError,
    SyncError,
    SyncInProgressError,
    RecordMappingError,
    ItemNotFoundError,
)
