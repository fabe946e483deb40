"""
Background scheduler for catalog sync passes.

Calls the shared sync service every SYNC_INTERVAL_MIN minutes. Disabled when
WOOCOMMERCE_URL is not set.
"""
import asyncio

from catalog.config import get_settings
from catalog.database import AsyncSessionLocal
from catalog.exceptions import CatalogError, SyncInProgress
from catalog.services.sync_service import CatalogSyncService, get_sync_service
from catalog.utils.logger import get_logger

logger = get_logger(__name__)

MIN_INTERVAL_MIN = 5


def sync_interval_seconds() -> int:
    settings = get_settings()
    return max(settings.SYNC_INTERVAL_MIN, MIN_INTERVAL_MIN) * 60


async def run_scheduled_sync(service: CatalogSyncService) -> dict:
    """
    One scheduled tick. Errors are reported in the returned summary so the
    loop keeps running.
    """
    try:
        async with AsyncSessionLocal() as db:
            result = await service.run_sync(db, trigger="schedule")
    except SyncInProgress:
        logger.info("Scheduled catalog sync skipped: a pass is already running")
        return {"status": "skipped", "reason": "sync in progress"}
    except CatalogError as e:
        return {"status": "error", "error": e.message}
    return {"status": "ok", **result.to_dict()}


async def start_catalog_sync_scheduler():
    """Background loop that syncs the catalog at the configured interval."""
    settings = get_settings()

    if not settings.WOOCOMMERCE_URL:
        logger.info("WOOCOMMERCE_URL not configured - catalog sync scheduler disabled")
        return

    interval = sync_interval_seconds()
    logger.info(
        f"Catalog sync scheduler started: syncing {settings.WOOCOMMERCE_URL} "
        f"every {interval // 60} min"
    )

    # Let the app finish startup first
    await asyncio.sleep(settings.SYNC_STARTUP_DELAY_SEC)

    service = get_sync_service()
    while True:
        try:
            result = await run_scheduled_sync(service)
            logger.info(f"Scheduled catalog sync result: {result}")
        except Exception as e:
            logger.error(f"Catalog sync scheduler error: {e}")

        await asyncio.sleep(interval)
