"""
Products API endpoints - mirrored catalog and sync triggers
"""
from decimal import Decimal
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import get_settings
from catalog.database import get_db
from catalog.exceptions import (
    SourceUnavailable,
    StoreWriteFailed,
    SyncInProgress,
)
from catalog.models.product import Product, StockStatus
from catalog.services.sync_scheduler import sync_interval_seconds
from catalog.services.sync_service import CatalogSyncService, get_sync_service

router = APIRouter()


class ProductResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    price: Decimal
    sku: Optional[str]
    stock: int
    stock_status: StockStatus
    on_sale: bool
    category: Optional[str]
    tags: Optional[str]
    is_active: bool
    synced_at: Optional[datetime]

    class Config:
        from_attributes = True


class ProductListResponse(BaseModel):
    products: List[ProductResponse]
    count: int
    message: str


class IngestResponse(BaseModel):
    message: str
    imported: int
    updated: int
    failed: int
    total: int


async def _run_ingestion(
    service: CatalogSyncService, db: AsyncSession, trigger: str
) -> dict:
    try:
        result = await service.run_sync(db, trigger=trigger)
    except SyncInProgress as e:
        raise HTTPException(status_code=409, detail=e.message)
    except SourceUnavailable as e:
        raise HTTPException(
            status_code=502,
            detail=f"Failed to fetch products from WooCommerce: {e.message}",
        )
    except StoreWriteFailed as e:
        raise HTTPException(status_code=500, detail=e.message)
    return result.to_dict()


@router.get("/", response_model=ProductListResponse)
async def list_products(db: AsyncSession = Depends(get_db)):
    """List every mirrored product"""
    result = await db.execute(select(Product).order_by(Product.id))
    products = result.scalars().all()
    return {
        "products": products,
        "count": len(products),
        "message": "Products fetched successfully",
    }


@router.post("/ingest", response_model=IngestResponse)
async def ingest_products(
    db: AsyncSession = Depends(get_db),
    service: CatalogSyncService = Depends(get_sync_service),
):
    """Fetch all WooCommerce products and upsert them into the local store"""
    result = await _run_ingestion(service, db, trigger="api")
    return {"message": "Products ingested successfully", **result}


@router.post("/ingest/manual", response_model=IngestResponse)
async def trigger_manual_ingestion(
    db: AsyncSession = Depends(get_db),
    service: CatalogSyncService = Depends(get_sync_service),
):
    """Run the scheduled ingestion immediately"""
    result = await _run_ingestion(service, db, trigger="manual")
    return {"message": "Manual ingestion triggered successfully", **result}


@router.get("/ingest/status")
async def get_ingestion_status(
    service: CatalogSyncService = Depends(get_sync_service),
):
    """Scheduler configuration and the outcome of the last sync pass"""
    settings = get_settings()
    return {
        "scheduler": {
            "enabled": bool(settings.WOOCOMMERCE_URL),
            "interval_minutes": sync_interval_seconds() // 60,
            "startup_delay_seconds": settings.SYNC_STARTUP_DELAY_SEC,
        },
        "last_pass": service.status(),
    }


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    """Get a single product by its WooCommerce id"""
    product = await db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
