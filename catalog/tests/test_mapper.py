"""
Record mapper and parsing helper tests.
"""
import json
from decimal import Decimal

import pytest

from catalog.models.product import StockStatus
from catalog.services.product_mapper import map_remote_product
from catalog.services.woocommerce_client import RemoteProduct
from catalog.tests.factories import remote_product
from catalog.utils.helpers import parse_decimal, parse_int, join_names


def test_maps_all_fields():
    remote = remote_product(
        42,
        name="Trail Shoe",
        description="Grippy",
        price="89.90",
        sku="TS-42",
        stock_quantity=7,
        stock_status="instock",
        on_sale=True,
        categories=[{"id": 3, "name": "Shoes"}, {"id": 9, "name": "Outdoor"}],
        tags=[{"id": 1, "name": "trail"}, {"id": 2, "name": "new"}],
        status="publish",
    )

    assert map_remote_product(remote) == {
        "id": 42,
        "name": "Trail Shoe",
        "description": "Grippy",
        "price": Decimal("89.90"),
        "sku": "TS-42",
        "stock": 7,
        "stock_status": StockStatus.INSTOCK,
        "on_sale": True,
        "category": "Shoes, Outdoor",
        "tags": "trail, new",
        "is_active": True,
    }


@pytest.mark.parametrize("price", ["", None, "free", "NaN", "Infinity"])
def test_bad_price_defaults_to_zero(price):
    assert map_remote_product(remote_product(1, price=price))["price"] == Decimal("0")


@pytest.mark.parametrize("stock, expected", [
    (None, 0), ("abc", 0), ("12", 12), ("3.0", 3), (4, 4),
    (float("inf"), 0), (float("-inf"), 0), (float("nan"), 0), ("Infinity", 0), ("NaN", 0),
])
def test_stock_is_parsed_defensively(stock, expected):
    assert map_remote_product(remote_product(1, stock_quantity=stock))["stock"] == expected


def test_non_finite_json_numbers_map_to_zero():
    remote = RemoteProduct.model_validate(
        json.loads('{"id": 1, "stock_quantity": Infinity, "price": NaN}')
    )
    data = map_remote_product(remote)
    assert data["stock"] == 0
    assert data["price"] == Decimal("0")


def test_unknown_stock_status_falls_back():
    data = map_remote_product(remote_product(1, stock_status="discontinued"))
    assert data["stock_status"] == StockStatus.OUTOFSTOCK


def test_backorder_and_case():
    data = map_remote_product(remote_product(1, stock_status="OnBackorder"))
    assert data["stock_status"] == StockStatus.ONBACKORDER


def test_unpublished_is_inactive():
    assert map_remote_product(remote_product(1, status="draft"))["is_active"] is False
    assert map_remote_product(remote_product(1, status=None))["is_active"] is False


def test_minimal_payload():
    data = map_remote_product(remote_product(5, name=None, sku="", categories=[], tags=[]))
    assert data["name"] == ""
    assert data["sku"] is None
    assert data["category"] == ""
    assert data["tags"] == ""


def test_mapping_is_pure():
    remote = remote_product(1, categories=[{"name": "B"}, {"name": "A"}])
    assert map_remote_product(remote) == map_remote_product(remote)
    assert [c.name for c in remote.categories] == ["B", "A"]


def test_helpers():
    assert parse_decimal(" 12.5 ") == Decimal("12.5")
    assert parse_decimal(True) == Decimal("0")
    assert parse_int("x", default=-1) == -1
    assert join_names(["Shoes", " ", "", "Sale "]) == "Shoes, Sale"
