"""
Maps WooCommerce products onto local Product column values.
"""
from catalog.models.product import StockStatus
from catalog.services.woocommerce_client import RemoteProduct
from catalog.utils.helpers import parse_decimal, parse_int, join_names

PUBLISHED_STATUS = "publish"


def _stock_status(raw: str | None) -> StockStatus:
    try:
        return StockStatus((raw or "").strip().lower())
    except ValueError:
        return StockStatus.OUTOFSTOCK


def map_remote_product(remote: RemoteProduct) -> dict:
    """
    Build the column values of a local Product from a remote one.

    Never raises for a validated RemoteProduct: unparseable prices and
    quantities become zero, unknown stock statuses become "outofstock".
    """
    return {
        "id": remote.id,
        "name": remote.name or "",
        "description": remote.description,
        "price": parse_decimal(remote.price),
        "sku": remote.sku or None,
        "stock": parse_int(remote.stock_quantity),
        "stock_status": _stock_status(remote.stock_status),
        "on_sale": bool(remote.on_sale),
        "category": join_names(c.name for c in remote.categories),
        "tags": join_names(t.name for t in remote.tags),
        "is_active": remote.status == PUBLISHED_STATUS,
    }
