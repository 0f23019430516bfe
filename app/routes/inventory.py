# app/routes/inventory.py
"""
Inventory item endpoints used by the dashboard and its photo/listing steps.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ItemNotFoundError, WholeCellConfigError, WholeCellServiceError
from app.dependencies import get_db, get_wholecell_client
from app.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemRead,
    InventoryItemUpdate,
    ListingGenerateRequest,
    ListingPayload,
    PhotosUpdate,
)
from app.services.csv_export import export_csv
from app.services.inventory_store import InventoryStore
from app.services.item_service import ItemService
from app.services.wholecell.client import WholeCellClient

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/inventory", tags=["inventory"])


def get_inventory_store(db: AsyncSession = Depends(get_db)) -> InventoryStore:
    return InventoryStore(db)


def get_item_service(store: InventoryStore = Depends(get_inventory_store)) -> ItemService:
    return ItemService(store)


def _not_found(item_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Inventory item {item_id} not found")


@router.get("", response_model=List[InventoryItemRead])
async def list_items(store: InventoryStore = Depends(get_inventory_store)):
    return await store.list()


@router.post("", response_model=InventoryItemRead, status_code=status.HTTP_201_CREATED)
async def create_item(
    payload: InventoryItemCreate,
    store: InventoryStore = Depends(get_inventory_store),
):
    """Manually entered item, not linked to WholeCell."""
    item = await store.create(payload.model_dump(mode="json"))
    logger.info(f"Created manual inventory item {item.id} ({item.sku})")
    return item


# Declared before /{item_id} so "export.csv" is not read as an id
@router.get("/export.csv")
async def export_items_csv(
    ids: Optional[str] = Query(None, description="Comma separated item ids; all items when omitted"),
    store: InventoryStore = Depends(get_inventory_store),
):
    if ids:
        wanted = [i.strip() for i in ids.split(",") if i.strip()]
        found = {item.id: item for item in await store.get_many(wanted)}
        items = [found[i] for i in wanted if i in found]
    else:
        items = await store.list()

    return Response(
        content=export_csv(items),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="ebay-listings.csv"'},
    )


@router.get("/{item_id}", response_model=InventoryItemRead)
async def get_item(item_id: str, store: InventoryStore = Depends(get_inventory_store)):
    item = await store.get(item_id)
    if item is None:
        raise _not_found(item_id)
    return item


@router.patch("/{item_id}", response_model=InventoryItemRead)
async def update_item(
    item_id: str,
    payload: InventoryItemUpdate,
    service: ItemService = Depends(get_item_service),
):
    try:
        return await service.apply_patch(item_id, payload.to_changes())
    except ItemNotFoundError:
        raise _not_found(item_id)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: str, store: InventoryStore = Depends(get_inventory_store)):
    if not await store.delete(item_id):
        raise _not_found(item_id)
    logger.info(f"Deleted inventory item {item_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{item_id}/photos", response_model=InventoryItemRead)
async def set_photos(
    item_id: str,
    payload: PhotosUpdate,
    service: ItemService = Depends(get_item_service),
):
    try:
        return await service.set_photos(item_id, payload.photos)
    except ItemNotFoundError:
        raise _not_found(item_id)


@router.post("/{item_id}/listing/generate", response_model=InventoryItemRead)
async def generate_listing(
    item_id: str,
    payload: Optional[ListingGenerateRequest] = None,
    service: ItemService = Depends(get_item_service),
):
    payload = payload or ListingGenerateRequest()
    try:
        return await service.generate_listing(item_id, price=payload.price, category=payload.category)
    except ItemNotFoundError:
        raise _not_found(item_id)


@router.put("/{item_id}/listing", response_model=InventoryItemRead)
async def save_listing(
    item_id: str,
    payload: ListingPayload,
    service: ItemService = Depends(get_item_service),
):
    try:
        return await service.save_listing(item_id, payload.model_dump())
    except ItemNotFoundError:
        raise _not_found(item_id)


@router.post("/{item_id}/listed", response_model=InventoryItemRead)
async def toggle_listed(item_id: str, service: ItemService = Depends(get_item_service)):
    try:
        return await service.toggle_listed(item_id)
    except ItemNotFoundError:
        raise _not_found(item_id)


@router.get("/{item_id}/vendor-photos")
async def get_vendor_photos(
    item_id: str,
    store: InventoryStore = Depends(get_inventory_store),
    client: WholeCellClient = Depends(get_wholecell_client),
) -> Dict[str, Any]:
    """Photos WholeCell holds for the item. Manual items have none."""
    item = await store.get(item_id)
    if item is None:
        raise _not_found(item_id)
    if item.wholecell_id is None:
        return {"id": item_id, "photos": []}

    try:
        photos = await client.fetch_photos(item.wholecell_id)
    except WholeCellConfigError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except WholeCellServiceError as e:
        logger.error(f"WholeCell photo lookup failed for {item_id}: {str(e)}")
        raise HTTPException(status_code=502, detail=str(e))

    return {"id": item_id, "photos": photos}
