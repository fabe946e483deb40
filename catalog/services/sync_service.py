"""
Catalog sync - reconciles the WooCommerce catalog into the local products table.

One pass fetches every remote product, maps it, and upserts it by id:
rows that already exist are overwritten in place, new ids are inserted.
Products that vanished remotely are left untouched.

Only one pass may run at a time; a second trigger while a pass is in flight
is rejected with SyncInProgress.
"""
import asyncio
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from functools import lru_cache
from typing import Optional, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import get_settings
from catalog.exceptions import SourceUnavailable, StoreWriteFailed, SyncInProgress
from catalog.models.product import Product
from catalog.services.product_mapper import map_remote_product
from catalog.services.woocommerce_client import RemoteProduct, WooCommerceClient
from catalog.utils.logger import get_logger

logger = get_logger(__name__)


class CatalogSource(Protocol):
    async def fetch_all_products(self) -> list[RemoteProduct]:
        ...


class SyncState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    RECONCILING = "reconciling"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SyncResult:
    imported: int = 0
    updated: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.imported + self.updated + self.failed

    def to_dict(self) -> dict:
        return {**asdict(self), "total": self.total}


async def _apply_record(db: AsyncSession, data: dict, synced_at: datetime) -> bool:
    """
    Upsert one mapped product. Returns True when a new row was created.
    """
    existing = await db.get(Product, data["id"])
    if existing:
        for key, value in data.items():
            if key != "id":
                setattr(existing, key, value)
        existing.synced_at = synced_at
        await db.flush()
        return False

    db.add(Product(**data, synced_at=synced_at))
    await db.flush()
    return True


class CatalogSyncService:
    """
    Runs sync passes from a catalog source into the products table.

    fail_fast=True aborts the pass (and rolls it back) on the first failed
    write. fail_fast=False writes every record in its own savepoint and counts
    failing records instead.
    """

    def __init__(self, source: CatalogSource, fail_fast: bool = True):
        self.source = source
        self.fail_fast = fail_fast
        self._lock = asyncio.Lock()
        self.state = SyncState.IDLE
        self.started_at: Optional[datetime] = None
        self.finished_at: Optional[datetime] = None
        self.last_result: Optional[SyncResult] = None
        self.last_error: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    async def run_sync(self, db: AsyncSession, trigger: str = "api") -> SyncResult:
        """
        Execute one full sync pass.

        Raises:
            SyncInProgress: another pass is in flight
            SourceUnavailable: the remote catalog could not be fetched
            StoreWriteFailed: a product could not be persisted (fail-fast mode)
        """
        if self._lock.locked():
            logger.warning(f"Catalog sync ({trigger}) rejected: a pass is already running")
            raise SyncInProgress()

        async with self._lock:
            self.started_at = datetime.utcnow()
            self.finished_at = None
            self.last_error = None
            logger.info(f"Catalog sync started (trigger={trigger})")
            try:
                self.state = SyncState.FETCHING
                remote_products = await self._fetch()

                self.state = SyncState.RECONCILING
                result = await self._reconcile(db, remote_products)
            except Exception as e:
                self.state = SyncState.FAILED
                self.last_error = str(e)
                logger.error(f"Catalog sync failed (trigger={trigger}): {e}")
                raise
            finally:
                self.finished_at = datetime.utcnow()

            self.state = SyncState.DONE
            self.last_result = result
            logger.info(
                f"Catalog sync complete: {len(remote_products)} products, "
                f"{result.imported} imported, {result.updated} updated, {result.failed} failed"
            )
            return result

    async def _fetch(self) -> list[RemoteProduct]:
        try:
            return list(await self.source.fetch_all_products())
        except SourceUnavailable:
            raise
        except Exception as e:
            raise SourceUnavailable(f"Failed to fetch products: {e}") from e

    async def _reconcile(
        self, db: AsyncSession, remote_products: list[RemoteProduct]
    ) -> SyncResult:
        result = SyncResult()
        synced_at = datetime.utcnow()

        for remote in remote_products:
            data = map_remote_product(remote)

            if self.fail_fast:
                try:
                    created = await _apply_record(db, data, synced_at)
                except Exception as e:
                    # driver errors such as OverflowError are not wrapped by SQLAlchemy
                    await db.rollback()
                    raise StoreWriteFailed(
                        f"Failed to store product {data['id']}: {e}",
                        {"product_id": data["id"]},
                    ) from e
            else:
                try:
                    async with db.begin_nested():
                        created = await _apply_record(db, data, synced_at)
                except Exception as e:
                    logger.error(f"Skipping product {data['id']}: {e}")
                    result.failed += 1
                    continue

            if created:
                result.imported += 1
            else:
                result.updated += 1

        try:
            await db.commit()
        except Exception as e:
            await db.rollback()
            raise StoreWriteFailed(f"Failed to commit sync pass: {e}") from e

        return result

    def status(self) -> dict:
        return {
            "state": self.state.value,
            "running": self.is_running,
            "fail_fast": self.fail_fast,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "last_result": self.last_result.to_dict() if self.last_result else None,
            "last_error": self.last_error,
        }


@lru_cache()
def get_sync_service() -> CatalogSyncService:
    """Process-wide sync service shared by the scheduler and the API"""
    settings = get_settings()
    return CatalogSyncService(
        WooCommerceClient.from_settings(),
        fail_fast=settings.SYNC_FAIL_FAST,
    )
