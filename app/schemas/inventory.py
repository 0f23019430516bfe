"""
Schemas for inventory item API endpoints.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, field_validator

from app.core.enums import ItemStatus
from .base import BaseSchema

# Columns a PATCH may clear with an explicit null
NULLABLE_FIELDS = ("listing", "sale_price", "warehouse", "location")


class ItemDetails(BaseSchema):
    """Device attributes. Unknown keys are kept as-is."""
    model_config = ConfigDict(extra="allow")

    brand: str = ""
    model: str = ""
    color: str = ""
    storage: Optional[str] = None
    variant: Optional[str] = None
    network: Optional[str] = None


class ListingPayload(BaseSchema):
    title: str
    description: str = ""
    price: float = 0.0
    category: str = ""

    @field_validator('price', mode='before')
    @classmethod
    def validate_price(cls, v):
        if v is None or v == '':
            return 0.0
        try:
            return float(v)
        except (ValueError, TypeError):
            raise ValueError(f'Price must be a valid number, got: {v}')


class InventoryItemCreate(BaseSchema):
    """Manually entered item. Synced items are only created by the WholeCell sync."""
    name: str
    sku: str
    condition: str
    status: ItemStatus = ItemStatus.NEW
    listed: bool = False
    details: ItemDetails
    photos: List[str] = Field(default_factory=list)
    listing: Optional[ListingPayload] = None
    sale_price: Optional[float] = None
    total_price_paid: Optional[float] = 0.0
    warehouse: Optional[str] = None
    location: Optional[str] = None


class InventoryItemUpdate(BaseSchema):
    """PATCH body: every field optional, only the fields sent are applied."""
    name: Optional[str] = None
    sku: Optional[str] = None
    condition: Optional[str] = None
    status: Optional[ItemStatus] = None
    listed: Optional[bool] = None
    details: Optional[ItemDetails] = None
    photos: Optional[List[str]] = None
    listing: Optional[ListingPayload] = None
    sale_price: Optional[float] = None
    total_price_paid: Optional[float] = None
    warehouse: Optional[str] = None
    location: Optional[str] = None

    def to_changes(self) -> Dict[str, Any]:
        changes = self.model_dump(exclude_unset=True, mode="json")
        return {
            key: value for key, value in changes.items()
            if value is not None or key in NULLABLE_FIELDS
        }


class InventoryItemRead(BaseSchema):
    id: str
    wholecell_id: Optional[int] = Field(None, alias="vendorId")
    name: str
    sku: str
    condition: str
    status: ItemStatus
    listed: bool
    details: Dict[str, Any]
    photos: List[str]
    listing: Optional[Dict[str, Any]] = None
    sale_price: Optional[float] = None
    total_price_paid: Optional[float] = None
    warehouse: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime
    last_updated: datetime


class PhotosUpdate(BaseSchema):
    photos: List[str]


class ListingGenerateRequest(BaseSchema):
    price: Optional[float] = None
    category: Optional[str] = None
