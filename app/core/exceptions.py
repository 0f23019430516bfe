from typing import Optional


class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    pass

class PlatformServiceError(BaseServiceError):
    """Base exception for external platform errors."""
    pass

class WholeCellServiceError(PlatformServiceError):
    """Base exception for WholeCell-specific errors."""
    pass

class WholeCellConfigError(WholeCellServiceError):
    """Raised when WholeCell credentials are missing, before any request is made."""

    def __init__(self, missing: list):
        self.missing = list(missing)
        super().__init__(
            f"WholeCell API credentials not configured. Please set {' and '.join(self.missing)}."
        )

class WholeCellAPIError(WholeCellServiceError):
    """Raised when WholeCell API calls fail."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

class SyncError(BaseServiceError):
    """Raised when a sync run or its progress stream is misused."""
    pass

class SyncInProgressError(SyncError):
    """Raised when a sync is requested while another run is still in flight."""
    pass

class RecordMappingError(BaseServiceError):
    """Raised when a vendor record cannot be mapped to an inventory item."""
    pass

class ItemNotFoundError(BaseServiceError):
    """Raised when an inventory item is not found."""
    pass
