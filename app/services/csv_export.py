# app/services/csv_export.py
"""
eBay File Exchange style CSV export for items that have a listing.
"""

import logging
from typing import Iterable, List

import pandas as pd

from app.models.inventory_item import InventoryItem

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "*Action(SiteID=US|Country=US|Currency=USD|Version=1193)",
    "CustomLabel",
    "*Category",
    "*Title",
    "*Description",
    "*ConditionID",
    "PicURL",
    "*Quantity",
    "*Format",
    "*StartPrice",
    "C:Brand",
    "C:Model",
    "C:Color",
    "C:Storage Capacity",
    "C:Network",
]

# WholeCell grades -> eBay condition ids (refurbished grades, used otherwise)
CONDITION_IDS = {
    "new": 1000,
    "a": 2030,
    "b": 2030,
    "c": 3000,
}
DEFAULT_CONDITION_ID = 3000


def condition_id_for(condition: str) -> int:
    key = (condition or "").strip().lower()
    key = key.removeprefix("grade").strip()
    return CONDITION_IDS.get(key, DEFAULT_CONDITION_ID)


def build_export_frame(items: Iterable[InventoryItem]) -> pd.DataFrame:
    """One row per item that has a listing, in the order given."""
    rows: List[dict] = []
    for item in items:
        listing = item.listing or {}
        if not listing:
            logger.debug(f"Skipping {item.id} in CSV export: no listing")
            continue
        details = item.details or {}
        rows.append({
            EXPORT_COLUMNS[0]: "Add",
            "CustomLabel": item.sku,
            "*Category": listing.get("category", ""),
            "*Title": listing.get("title", ""),
            "*Description": listing.get("description", ""),
            "*ConditionID": condition_id_for(item.condition),
            "PicURL": "|".join(item.photos or []),
            "*Quantity": 1,
            "*Format": "FixedPrice",
            "*StartPrice": listing.get("price", ""),
            "C:Brand": details.get("brand", ""),
            "C:Model": details.get("model", ""),
            "C:Color": details.get("color", ""),
            "C:Storage Capacity": details.get("storage", ""),
            "C:Network": details.get("network", ""),
        })
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def export_csv(items: Iterable[InventoryItem]) -> str:
    return build_export_frame(items).to_csv(index=False)
