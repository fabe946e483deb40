"""
WooCommerce REST API client - the catalog source for sync passes.

Pages through ``GET /wp-json/wc/v3/products`` and returns every product of
the store as a ``RemoteProduct``. Transport errors, 429 and 5xx responses are
retried with exponential backoff; anything else that keeps the client from
returning the full list raises ``SourceUnavailable``.

Config (in .env):
    WOOCOMMERCE_URL=https://shop.example.com
    WOOCOMMERCE_CONSUMER_KEY=ck_...
    WOOCOMMERCE_CONSUMER_SECRET=cs_...
    WOOCOMMERCE_PER_PAGE=100
"""
import asyncio
from typing import Any, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from catalog.config import get_settings
from catalog.exceptions import SourceUnavailable
from catalog.utils.logger import get_logger

logger = get_logger(__name__)

PRODUCTS_ENDPOINT = "/wp-json/wc/v3/products"
RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class RemoteTerm(BaseModel):
    """Category or tag reference embedded in a product"""
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    name: str = ""
    slug: Optional[str] = None


class RemoteProduct(BaseModel):
    """Product as returned by the WooCommerce API (only the fields we mirror)"""
    model_config = ConfigDict(extra="ignore")

    id: int
    name: Optional[str] = None
    description: Optional[str] = None
    price: Any = None  # decimal-as-string, often "" for draft products
    sku: Optional[str] = None
    stock_quantity: Any = None
    stock_status: Optional[str] = None
    on_sale: bool = False
    categories: List[RemoteTerm] = []
    tags: List[RemoteTerm] = []
    status: Optional[str] = None


class WooCommerceClient:
    """Async client for the products endpoint of a WooCommerce store"""

    def __init__(
        self,
        base_url: str,
        consumer_key: str,
        consumer_secret: str,
        per_page: int = 100,
        timeout: float = 30.0,
        max_retries: int = 3,
        backoff_seconds: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.auth = (consumer_key, consumer_secret)
        self.per_page = per_page
        self.timeout = timeout
        self.max_retries = max(max_retries, 0)
        self.backoff_seconds = backoff_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls) -> "WooCommerceClient":
        settings = get_settings()
        return cls(
            base_url=settings.WOOCOMMERCE_URL,
            consumer_key=settings.WOOCOMMERCE_CONSUMER_KEY,
            consumer_secret=settings.WOOCOMMERCE_CONSUMER_SECRET,
            per_page=settings.WOOCOMMERCE_PER_PAGE,
            timeout=settings.WOOCOMMERCE_TIMEOUT,
            max_retries=settings.WOOCOMMERCE_MAX_RETRIES,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    async def fetch_all_products(self) -> list[RemoteProduct]:
        """
        Fetch every product of the store, following pagination.

        Raises:
            SourceUnavailable: the store is not configured, unreachable, keeps
                failing after retries, rejects the request, or returns a
                payload that is not a product list.
        """
        if not self.is_configured:
            raise SourceUnavailable("WooCommerce store URL is not configured")

        products: list[RemoteProduct] = []
        async with httpx.AsyncClient(
            base_url=self.base_url,
            auth=self.auth,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            page = 1
            while True:
                response = await self._get_page(client, page)
                try:
                    payload = response.json()
                except ValueError as e:
                    raise SourceUnavailable(
                        "WooCommerce returned invalid JSON", {"page": page}
                    ) from e
                if not isinstance(payload, list):
                    raise SourceUnavailable(
                        "Unexpected products payload from WooCommerce",
                        {"page": page, "type": type(payload).__name__},
                    )

                try:
                    products.extend(RemoteProduct.model_validate(item) for item in payload)
                except ValidationError as e:
                    raise SourceUnavailable(
                        "Malformed product in WooCommerce response",
                        {"page": page, "errors": e.error_count()},
                    ) from e

                total_pages = _total_pages(response)
                if total_pages is not None:
                    if page >= total_pages:
                        break
                elif len(payload) < self.per_page:
                    break
                page += 1

        logger.info(f"Fetched {len(products)} products from WooCommerce ({page} pages)")
        return products

    async def _get_page(self, client: httpx.AsyncClient, page: int) -> httpx.Response:
        params = {"per_page": self.per_page, "page": page}
        attempt = 0
        while True:
            try:
                response = await client.get(PRODUCTS_ENDPOINT, params=params)
            except httpx.HTTPError as e:
                if attempt >= self.max_retries:
                    raise SourceUnavailable(
                        f"WooCommerce unreachable: {e}", {"page": page}
                    ) from e
                logger.warning(f"WooCommerce request failed (page {page}, attempt {attempt + 1}): {e}")
            else:
                if response.status_code < 400:
                    return response
                if response.status_code not in RETRYABLE_STATUS or attempt >= self.max_retries:
                    raise SourceUnavailable(
                        f"WooCommerce returned HTTP {response.status_code}",
                        {"page": page, "status_code": response.status_code},
                    )
                logger.warning(
                    f"WooCommerce returned HTTP {response.status_code} "
                    f"(page {page}, attempt {attempt + 1}), retrying"
                )

            await asyncio.sleep(self.backoff_seconds * (2 ** attempt))
            attempt += 1


def _total_pages(response: httpx.Response) -> Optional[int]:
    raw = response.headers.get("X-WP-TotalPages")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None
