import io

import pandas as pd
import pytest

from app.services.inventory_store import InventoryStore
from app.services.wholecell.mapper import map_wholecell_record

from tests.mocks.mock_wholecell import wholecell_record

MANUAL_ITEM = {
    "name": "Google - Pixel 8 - 128GB - Obsidian",
    "sku": "PX8-128-OB",
    "condition": "B",
    "details": {"brand": "Google", "model": "Pixel 8", "color": "Obsidian", "storage": "128GB"},
    "salePrice": 399.0,
}


@pytest.fixture
async def synced_item(db_session):
    store = InventoryStore(db_session)
    return await store.upsert(42, map_wholecell_record(wholecell_record(42)).to_fields())


@pytest.mark.asyncio
async def test_list_items_uses_camel_case(api_client, synced_item):
    response = await api_client.get("/api/inventory")

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 1
    item = body[0]
    assert item["id"] == synced_item.id
    assert item["vendorId"] == 42
    assert item["salePrice"] == 1250.0
    assert item["totalPricePaid"] == 800.0
    assert item["status"] == "new"
    assert item["photos"] == []
    assert item["listing"] is None
    assert "createdAt" in item and "lastUpdated" in item


@pytest.mark.asyncio
async def test_get_unknown_item_is_404(api_client):
    response = await api_client.get("/api/inventory/does-not-exist")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_manual_item(api_client):
    response = await api_client.post("/api/inventory", json=MANUAL_ITEM)

    assert response.status_code == 201
    item = response.json()
    assert item["vendorId"] is None
    assert item["status"] == "new"
    assert item["details"]["brand"] == "Google"
    assert item["salePrice"] == 399.0


@pytest.mark.asyncio
async def test_create_rejects_invalid_body(api_client):
    response = await api_client.post("/api/inventory", json={"name": "missing fields"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_patch_updates_only_sent_fields(api_client, synced_item):
    response = await api_client.patch(
        f"/api/inventory/{synced_item.id}", json={"location": "Bin 9", "photos": ["f.jpg"]}
    )

    assert response.status_code == 200
    item = response.json()
    assert item["location"] == "Bin 9"
    assert item["photos"] == ["f.jpg"]
    assert item["status"] == "photos_completed"
    assert item["sku"] == synced_item.sku


@pytest.mark.asyncio
async def test_patch_unknown_item_is_404(api_client):
    response = await api_client.patch("/api/inventory/nope", json={"listed": True})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_item(api_client, synced_item):
    response = await api_client.delete(f"/api/inventory/{synced_item.id}")
    assert response.status_code == 204

    assert (await api_client.get(f"/api/inventory/{synced_item.id}")).status_code == 404
    assert (await api_client.delete(f"/api/inventory/{synced_item.id}")).status_code == 404


@pytest.mark.asyncio
async def test_photos_then_listing_flow(api_client, synced_item):
    photos = await api_client.put(
        f"/api/inventory/{synced_item.id}/photos", json={"photos": ["front.jpg", "back.jpg"]}
    )
    assert photos.json()["status"] == "photos_completed"

    generated = await api_client.post(f"/api/inventory/{synced_item.id}/listing/generate")
    body = generated.json()
    assert generated.status_code == 200
    assert body["status"] == "listing_generated"
    assert body["listing"]["price"] == 1250.0
    assert body["photos"] == ["front.jpg", "back.jpg"]

    edited = await api_client.put(
        f"/api/inventory/{synced_item.id}/listing",
        json={"title": "Edited title", "description": "d", "price": "1100", "category": "9355"},
    )
    assert edited.json()["listing"] == {
        "title": "Edited title", "description": "d", "price": 1100.0, "category": "9355",
    }


@pytest.mark.asyncio
async def test_generate_listing_with_overrides(api_client, synced_item):
    response = await api_client.post(
        f"/api/inventory/{synced_item.id}/listing/generate", json={"price": 10.5, "category": "Phones"}
    )

    listing = response.json()["listing"]
    assert listing["price"] == 10.5
    assert listing["category"] == "Phones"


@pytest.mark.asyncio
async def test_toggle_listed(api_client, synced_item):
    first = await api_client.post(f"/api/inventory/{synced_item.id}/listed")
    second = await api_client.post(f"/api/inventory/{synced_item.id}/listed")

    assert first.json()["listed"] is True
    assert second.json()["listed"] is False


@pytest.mark.asyncio
async def test_collaborator_routes_404_for_unknown_item(api_client):
    assert (await api_client.put("/api/inventory/nope/photos", json={"photos": []})).status_code == 404
    assert (await api_client.post("/api/inventory/nope/listing/generate")).status_code == 404
    assert (await api_client.post("/api/inventory/nope/listed")).status_code == 404


@pytest.mark.asyncio
async def test_export_csv_only_includes_listed_items(api_client, synced_item):
    await api_client.post(f"/api/inventory/{synced_item.id}/listing/generate")
    other = (await api_client.post("/api/inventory", json=MANUAL_ITEM)).json()

    response = await api_client.get(f"/api/inventory/export.csv?ids={synced_item.id},{other['id']}")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    frame = pd.read_csv(io.StringIO(response.text))
    assert list(frame["CustomLabel"]) == [synced_item.sku]


@pytest.mark.asyncio
async def test_vendor_photos_proxy(api_client, synced_item, fake_wholecell):
    fake_wholecell.photos[42] = [{"id": 1, "url": "https://cdn.example.com/1.jpg"}]

    response = await api_client.get(f"/api/inventory/{synced_item.id}/vendor-photos")

    assert response.json() == {"id": synced_item.id, "photos": fake_wholecell.photos[42]}


@pytest.mark.asyncio
async def test_vendor_photos_config_error_is_503(api_client, synced_item, fake_wholecell):
    fake_wholecell.fail_with_missing_credentials()

    response = await api_client.get(f"/api/inventory/{synced_item.id}/vendor-photos")

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_vendor_photos_api_error_is_502(api_client, synced_item, fake_wholecell):
    fake_wholecell.fail_with_api_error()

    response = await api_client.get(f"/api/inventory/{synced_item.id}/vendor-photos")

    assert response.status_code == 502
