from app.services.listing_generator import generate_listing

DETAILS = {
    "brand": "Apple",
    "model": "iPhone 15 Pro",
    "storage": "256GB",
    "color": "Natural Titanium",
    "network": "GSM",
    "variant": "Unlocked",
    "conditions": ["Minor scratches"],
}


def test_title_from_details_and_condition():
    listing = generate_listing("iPhone", "A", DETAILS, price=1250.0, category="Phones")

    assert listing["title"] == "Apple iPhone 15 Pro 256GB Natural Titanium - A Condition"
    assert listing["price"] == 1250.0
    assert listing["category"] == "Phones"


def test_description_lists_known_attributes():
    description = generate_listing("iPhone", "A", DETAILS)["description"]

    assert "Condition: A" in description
    assert "Storage: 256GB" in description
    assert "Network: GSM" in description
    assert "Carrier: Unlocked" in description
    assert "Notes: Minor scratches" in description


def test_title_is_capped_at_80_characters():
    details = dict(DETAILS, model="X" * 100)

    assert len(generate_listing("n", "A", details)["title"]) == 80


def test_defaults_when_price_and_category_missing():
    listing = generate_listing("Item 00AB", "Unknown", {})

    assert listing["title"] == "Item 00AB - Unknown Condition"
    assert listing["price"] == 999.0
    assert listing["category"] == "Cell Phones & Accessories > Cell Phones & Smartphones"


def test_generation_is_deterministic():
    assert generate_listing("n", "A", DETAILS, 10.0) == generate_listing("n", "A", DETAILS, 10.0)
