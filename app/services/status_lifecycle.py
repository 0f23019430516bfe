# app/services/status_lifecycle.py
"""
Inventory item status lifecycle.

Items move forward through new -> photos_completed -> listing_generated as
the photo manager and listing generator act on them. The `listed` flag is
separate and can be set at any status.

WholeCell reports free-text statuses ("Needs eBay Draft", "Ready for Photos",
"Sold - Direct", ...). They are classified with an ordered rule table, first
match wins, and anything unmatched is treated as new.
"""

from typing import Optional, Sequence, Tuple

from app.core.enums import ItemStatus

# (substrings, status), evaluated in order against the lower-cased vendor text
VENDOR_STATUS_RULES: Tuple[Tuple[Tuple[str, ...], ItemStatus], ...] = (
    (("listed", "sold"), ItemStatus.LISTING_GENERATED),
    (("ready", "processed"), ItemStatus.PHOTOS_COMPLETED),
)


def derive_vendor_status(vendor_status: Optional[str]) -> ItemStatus:
    """Classify WholeCell status text. Never raises; unknown text maps to new."""
    if not vendor_status or not isinstance(vendor_status, str):
        return ItemStatus.NEW

    text = vendor_status.lower()
    for patterns, status in VENDOR_STATUS_RULES:
        if any(pattern in text for pattern in patterns):
            return status
    return ItemStatus.NEW


def max_status(a: ItemStatus, b: ItemStatus) -> ItemStatus:
    """The further along of two statuses."""
    return a if a.rank >= b.rank else b


def status_after_photos(current: ItemStatus, photos: Sequence[str]) -> ItemStatus:
    """Adding the first photo to a new item completes the photo step."""
    if photos and current == ItemStatus.NEW:
        return ItemStatus.PHOTOS_COMPLETED
    return current


def status_after_listing(current: ItemStatus) -> ItemStatus:
    """Saving a listing always lands on listing_generated, whatever the photo count."""
    return max_status(current, ItemStatus.LISTING_GENERATED)


def status_for_sync(
    mapped: ItemStatus,
    existing: Optional[ItemStatus],
    preserve_local: bool = False,
) -> ItemStatus:
    """
    Status written by a sync upsert.

    By default the mapped vendor status wins, even when it is behind what the
    photo manager or listing generator already reached. With preserve_local the
    sync never moves an existing item backwards.
    """
    if preserve_local and existing is not None:
        return max_status(mapped, existing)
    return mapped
