"""
Product model - local mirror of a WooCommerce product
"""
from sqlalchemy import Column, Integer, String, Boolean, Text, Numeric, DateTime, Enum as SQLEnum
from catalog.database import Base
from enum import Enum


class StockStatus(str, Enum):
    INSTOCK = "instock"
    OUTOFSTOCK = "outofstock"
    ONBACKORDER = "onbackorder"


class Product(Base):
    """Catalog product keyed by its remote WooCommerce id"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=False)  # remote id
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    sku = Column(String, nullable=True, index=True)  # unique remotely, not here
    stock = Column(Integer, nullable=False, default=0)
    stock_status = Column(
        SQLEnum(
            StockStatus,
            name="stock_status",
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
            length=20,
        ),
        nullable=False,
        default=StockStatus.OUTOFSTOCK,
    )
    on_sale = Column(Boolean, nullable=False, default=False)
    category = Column(Text, nullable=True)  # comma-joined category names
    tags = Column(Text, nullable=True)  # comma-joined tag names
    is_active = Column(Boolean, nullable=False, default=True)
    synced_at = Column(DateTime, nullable=True)
