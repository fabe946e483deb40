"""
Test data builders for WooCommerce payloads and catalog sources
"""
from catalog.services.woocommerce_client import RemoteProduct


def product_payload(id: int, **overrides) -> dict:
    """WooCommerce product JSON with sensible defaults"""
    payload = {
        "id": id,
        "name": f"Product {id}",
        "description": f"<p>Description {id}</p>",
        "price": "10.00",
        "sku": f"SKU-{id}",
        "stock_quantity": 5,
        "stock_status": "instock",
        "on_sale": False,
        "categories": [{"id": 1, "name": "Misc", "slug": "misc"}],
        "tags": [],
        "status": "publish",
    }
    payload.update(overrides)
    return payload


def remote_product(id: int, **overrides) -> RemoteProduct:
    return RemoteProduct.model_validate(product_payload(id, **overrides))


class FakeCatalogSource:
    """In-memory catalog source; set .error to make fetching fail"""

    def __init__(self, products=None):
        self.products = list(products or [])
        self.error = None
        self.calls = 0

    async def fetch_all_products(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.products)
