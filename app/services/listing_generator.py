"""
Template-based eBay listing text for a device.

Deterministic: the same item details always give the same listing.
"""

from typing import Any, Dict, Optional

from app.core.config import get_settings


def _clean(*parts: Optional[str]) -> str:
    return " ".join(p.strip() for p in parts if p and p.strip())


def generate_listing(
    name: str,
    condition: str,
    details: Dict[str, Any],
    price: Optional[float] = None,
    category: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build a listing payload ({title, description, price, category}).

    Price falls back to the item's sale price handled by the caller, then to
    LISTING_DEFAULT_PRICE.
    """
    settings = get_settings()
    details = details or {}
    brand = details.get("brand") or ""
    model = details.get("model") or ""
    storage = details.get("storage") or ""
    color = details.get("color") or ""

    headline = _clean(brand, model, storage, color) or name
    title = f"{headline} - {condition} Condition"[:80]

    lines = [f"For sale is a {_clean(brand, model) or name}" + (f" in {color}." if color else ".")]
    lines.append("")
    lines.append(f"Condition: {condition}")
    if storage:
        lines.append(f"Storage: {storage}")
    if details.get("network"):
        lines.append(f"Network: {details['network']}")
    if details.get("variant"):
        lines.append(f"Carrier: {details['variant']}")
    if details.get("conditions"):
        lines.append(f"Notes: {', '.join(details['conditions'])}")
    lines.append("")
    lines.append("This device has been fully tested and is ready for a new home. Fast shipping!")

    return {
        "title": title,
        "description": "\n".join(lines),
        "price": float(price) if price is not None else settings.LISTING_DEFAULT_PRICE,
        "category": category or settings.LISTING_DEFAULT_CATEGORY,
    }
