import json

import pytest

from app.core.errors import NoValidSkusError
from app.services.payload_builder import build_sync_payload, snapshot_products
from tests.factories import plain_order, product


def test_builds_payload_with_sku_products_in_order():
    order = plain_order([product("BK-2", "Second"), product("BK-1", "First"), product("BK-2", "Second")], order_id=42)

    payload = build_sync_payload(order)

    assert payload.order_id == 42
    assert payload.order_number == "42"
    assert payload.email == "reader@example.com"
    assert payload.name == "Ada Lovelace"
    # Stored order, duplicates kept
    assert [p.sku for p in payload.products] == ["BK-2", "BK-1", "BK-2"]


def test_items_without_sku_are_dropped():
    order = plain_order([product(None, "Mystery"), product("", "Empty"), product("BK-1", "Ebook One")])

    payload = build_sync_payload(order)

    assert [p.model_dump() for p in payload.products] == [{"sku": "BK-1", "name": "Ebook One"}]


def test_whitespace_sku_counts_as_empty_and_skus_are_trimmed():
    order = plain_order([product("   ", "Blank"), product("  BK-9 ", "Padded")])

    payload = build_sync_payload(order)

    assert [p.sku for p in payload.products] == ["BK-9"]


def test_deleted_products_are_skipped():
    order = plain_order([None, product("BK-1", "Ebook One")])

    assert len(build_sync_payload(order).products) == 1


@pytest.mark.parametrize("items", [[], [product(None, "Mystery")], [product("  ", "Blank")], [None]])
def test_orders_without_valid_skus_fail(items):
    with pytest.raises(NoValidSkusError) as excinfo:
        build_sync_payload(plain_order(items))

    assert "no products" in str(excinfo.value)


def test_serialized_body_matches_wire_format():
    body = build_sync_payload(plain_order([product("BK-1", "Ebook One")], order_id=7)).to_bytes()

    assert json.loads(body) == {
        "order_id": 7,
        "order_number": "7",
        "email": "reader@example.com",
        "name": "Ada Lovelace",
        "products": [{"sku": "BK-1", "name": "Ebook One"}],
    }


def test_snapshot_keeps_products_without_sku():
    order = plain_order([product(None, "Mystery"), product(" BK-1 ", "Ebook One"), None])

    assert snapshot_products(order) == [
        {"sku": None, "name": "Mystery"},
        {"sku": "BK-1", "name": "Ebook One"},
    ]
