"""
Map raw WholeCell inventory records to the local inventory item shape.

Pure functions only: no I/O, no clock, same input gives the same output.
"""

import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.core.enums import ItemStatus
from app.core.exceptions import RecordMappingError
from app.services.status_lifecycle import derive_vendor_status

logger = logging.getLogger(__name__)

NAME_SEPARATOR = " - "
UNKNOWN_CONDITION = "Unknown"


@dataclass
class MappedItem:
    wholecell_id: int
    name: str
    sku: str
    condition: str
    status: ItemStatus
    listed: bool
    details: Dict[str, Any] = field(default_factory=dict)
    sale_price: Optional[float] = None
    total_price_paid: float = 0.0
    warehouse: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_fields(self) -> Dict[str, Any]:
        """Column values for the inventory store, keyed by column name."""
        fields = asdict(self)
        fields.pop("wholecell_id")
        fields["status"] = self.status.value
        return fields


def _safe_get(data, *keys, default=None):
    """Walk nested dicts, returning default as soon as a level is missing."""
    current = data
    for key in keys:
        if not isinstance(current, dict):
            return default
        current = current.get(key)
        if current is None:
            return default
    return current


def _as_dict(value) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _cents_to_units(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return round(float(value) / 100, 2)
    except (TypeError, ValueError):
        logger.debug(f"Unparseable WholeCell money amount: {value!r}")
        return None


def _parse_timestamp(timestamp_str) -> Optional[datetime]:
    if not timestamp_str or not isinstance(timestamp_str, str):
        return None
    try:
        parsed = datetime.fromisoformat(timestamp_str.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable WholeCell timestamp: {timestamp_str!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def build_name(product: Dict[str, Any], hex_id: str) -> str:
    parts = [
        _safe_get(product, "manufacturer"),
        _safe_get(product, "model"),
        _safe_get(product, "capacity"),
        _safe_get(product, "color"),
    ]
    parts = [str(p) for p in parts if p]
    if parts:
        return NAME_SEPARATOR.join(parts)
    return f"Item {hex_id}"


def build_details(record: Dict[str, Any]) -> Dict[str, Any]:
    variation = _as_dict(record.get("product_variation"))
    product = _as_dict(variation.get("product"))
    raw_conditions = variation.get("conditions")
    if not isinstance(raw_conditions, list):
        raw_conditions = []
    conditions: List[str] = [
        c.get("title") for c in raw_conditions
        if isinstance(c, dict) and c.get("title")
    ]
    return {
        "brand": product.get("manufacturer") or "",
        "model": product.get("model") or "",
        "color": product.get("color") or "",
        "storage": product.get("capacity") or "",
        "variant": product.get("variant") or "",
        "network": product.get("network") or "",
        "esn": record.get("esn") or "",
        "hexId": record.get("hex_id") or "",
        "grade": variation.get("grade") or "",
        "conditions": conditions,
    }


def map_wholecell_record(record: Dict[str, Any]) -> MappedItem:
    """
    Translate one WholeCell inventory record into a MappedItem.

    Raises:
        RecordMappingError: if the record has no usable integer id
    """
    if not isinstance(record, dict):
        raise RecordMappingError(f"WholeCell record is not an object: {type(record).__name__}")

    vendor_id = record.get("id")
    if isinstance(vendor_id, bool) or not isinstance(vendor_id, int):
        raise RecordMappingError(f"WholeCell record has no integer id: {vendor_id!r}")

    hex_id = str(record.get("hex_id") or "")
    variation = _as_dict(record.get("product_variation"))
    product = _as_dict(variation.get("product"))

    total_paid = _cents_to_units(record.get("total_price_paid"))

    return MappedItem(
        wholecell_id=vendor_id,
        name=build_name(product, hex_id),
        sku=variation.get("sku") or hex_id,
        condition=variation.get("grade") or UNKNOWN_CONDITION,
        status=derive_vendor_status(record.get("status")),
        listed=record.get("order_id") is not None,
        details=build_details(record),
        sale_price=_cents_to_units(record.get("sale_price")),
        total_price_paid=total_paid if total_paid is not None else 0.0,
        warehouse=_safe_get(record, "warehouse", "name"),
        location=_safe_get(record, "location", "name"),
        created_at=_parse_timestamp(record.get("created_at")),
    )
