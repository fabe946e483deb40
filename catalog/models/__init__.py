from catalog.models.product import Product, StockStatus

__all__ = [
    "Product",
    "StockStatus",
]
