import pytest

from app.core.exceptions import ItemNotFoundError
from app.services.inventory_store import InventoryStore
from app.services.item_service import ItemService
from app.services.wholecell.mapper import map_wholecell_record

from tests.mocks.mock_wholecell import wholecell_record


@pytest.fixture
async def synced_item(db_session):
    store = InventoryStore(db_session)
    return await store.upsert(5, map_wholecell_record(wholecell_record(5)).to_fields())


@pytest.fixture
def service(db_session):
    return ItemService(InventoryStore(db_session))


@pytest.mark.asyncio
async def test_first_photo_moves_new_to_photos_completed(service, synced_item):
    item = await service.set_photos(synced_item.id, ["front.jpg"])

    assert item.photos == ["front.jpg"]
    assert item.status == "photos_completed"


@pytest.mark.asyncio
async def test_clearing_photos_keeps_status(service, synced_item):
    await service.set_photos(synced_item.id, ["front.jpg"])

    item = await service.set_photos(synced_item.id, [])

    assert item.photos == []
    assert item.status == "photos_completed"


@pytest.mark.asyncio
async def test_generated_listing_is_saved_and_advances_status(service, synced_item):
    item = await service.generate_listing(synced_item.id)

    assert item.status == "listing_generated"
    assert item.listing["title"].startswith("Apple iPhone 15 Pro 256GB Natural Titanium")
    assert item.listing["price"] == 1250.0


@pytest.mark.asyncio
async def test_saved_listing_advances_status_without_photos(service, synced_item):
    listing = {"title": "Edited", "description": "d", "price": 10.0, "category": "c"}

    item = await service.save_listing(synced_item.id, listing)

    assert item.listing == listing
    assert item.status == "listing_generated"


@pytest.mark.asyncio
async def test_toggle_listed(service, synced_item):
    assert (await service.toggle_listed(synced_item.id)).listed is True
    assert (await service.toggle_listed(synced_item.id)).listed is False


@pytest.mark.asyncio
async def test_patch_with_photos_applies_lifecycle(service, synced_item):
    item = await service.apply_patch(synced_item.id, {"photos": ["a.jpg"], "location": "Bin 4"})

    assert item.status == "photos_completed"
    assert item.location == "Bin 4"


@pytest.mark.asyncio
async def test_patch_without_lifecycle_fields_keeps_status(service, synced_item):
    item = await service.apply_patch(synced_item.id, {"name": "Renamed"})

    assert item.name == "Renamed"
    assert item.status == "new"


@pytest.mark.asyncio
async def test_unknown_item_raises(service):
    with pytest.raises(ItemNotFoundError):
        await service.set_photos("missing", ["a.jpg"])
