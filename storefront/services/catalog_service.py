"""
Catalog Service

Loads the catalog from the record API, normalizes it, and keeps the result
for a revalidation interval. Browsing, price quotes and the add-on upsell
are answered from the cached product list.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional

from storefront.clients.catalog_client import CatalogClient
from storefront.core.config import config
from storefront.core.errors import ErrorResponse
from storefront.core.logger import logger
from storefront.models.catalog import CatalogSnapshot, Product
from storefront.models.cart import PriceQuote, PriceQuoteRequest
from storefront.models.raw_records import parse_addon_record
from storefront.models.selection import SelectionRequest, SelectionView
from storefront.services.catalog_normalizer import CatalogNormalizer, media_reference
from storefront.services.contact_links import custom_order_link
from storefront.services.selection_engine import SelectionEngine


class CatalogService:
    """Cached, normalized catalog shared by every browsing session."""

    def __init__(
        self,
        client: CatalogClient,
        normalizer: Optional[CatalogNormalizer] = None,
        revalidate_seconds: Optional[int] = None,
        retry_seconds: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.normalizer = normalizer or CatalogNormalizer()
        self.revalidate_seconds = (
            revalidate_seconds if revalidate_seconds is not None else config.catalog_revalidate_seconds
        )
        self.retry_seconds = retry_seconds if retry_seconds is not None else config.catalog_retry_seconds
        self.clock = clock
        self._products: Optional[List[Product]] = None
        self._loaded_at: Optional[float] = None
        self._degraded = False
        self._fetched_at: Optional[str] = None
        self._addon_image: Optional[str] = None
        self._lock = asyncio.Lock()

    def _is_fresh(self) -> bool:
        if self._products is None or self._loaded_at is None:
            return False
        interval = self.revalidate_seconds
        if self._degraded:
            # an empty or partial read is retried sooner
            interval = min(interval, self.retry_seconds)
        return self.clock() - self._loaded_at < interval

    async def get_products(self, force: bool = False) -> List[Product]:
        """Return the cached catalog, reloading it when stale or forced."""
        if not force and self._is_fresh():
            return self._products

        async with self._lock:
            # Another caller may have refreshed while we waited
            if not force and self._is_fresh():
                return self._products
            await self._reload()
        return self._products

    async def _reload(self) -> None:
        started = time.perf_counter()
        garments, accessories, addons = await asyncio.gather(
            self.client.fetch_garments(),
            self.client.fetch_accessories(),
            self.client.fetch_addons(),
        )
        self._products = self.normalizer.normalize_tables(garments, accessories)
        self._addon_image = self._find_addon_image(addons)
        incomplete = sorted(self.client.incomplete_tables)
        self._degraded = not garments or not accessories or bool(incomplete)
        self._loaded_at = self.clock()
        self._fetched_at = datetime.now(timezone.utc).isoformat()

        logger.performance(
            "catalog_reload",
            int((time.perf_counter() - started) * 1000),
            threshold_ms=5000,
            metadata={"products": len(self._products)},
        )
        if self._degraded:
            logger.warning(
                f"Catalog read was empty or incomplete, retrying in {self.retry_seconds}s",
                metadata={"event": "catalog_reload_degraded", "incomplete_tables": incomplete},
            )

    @staticmethod
    def _find_addon_image(rows) -> Optional[str]:
        for row in rows or []:
            record = parse_addon_record(row)
            if record is None or record.name != config.fringe_addon_record_name:
                continue
            if record.attachments:
                return media_reference(record.attachments[0].path)
            return None
        return None

    async def snapshot(self, force: bool = False) -> CatalogSnapshot:
        products = await self.get_products(force=force)
        return CatalogSnapshot(
            products=products,
            product_count=len(products),
            fetched_at=self._fetched_at,
        )

    async def get_product(self, product_id: str) -> Product:
        for product in await self.get_products():
            if product.id == product_id:
                return product
        raise ErrorResponse(f"Product {product_id} not found", status_code=404)

    async def get_fringe_addon(self) -> dict:
        await self.get_products()
        return {"image": self._addon_image, "fee": config.fringe_addon_fee}

    async def build_engine(self) -> SelectionEngine:
        """A fresh selection engine for one browsing session."""
        return SelectionEngine(await self.get_products())

    async def browse(self, request: SelectionRequest) -> SelectionView:
        engine = await self.build_engine()
        engine.apply_request(request)
        view = engine.view()
        if view.is_custom:
            view.custom_order_link = custom_order_link()
        return view

    async def quote(self, request: PriceQuoteRequest) -> PriceQuote:
        engine = await self.build_engine()
        product, variant = engine.resolve_variant(request.product_id, request.variant_id)
        if product is None:
            raise ErrorResponse(f"Product {request.product_id} not found", status_code=404)
        if request.variant_id is not None and variant is None:
            raise ErrorResponse(
                f"Variant {request.variant_id} not found for product {request.product_id}",
                status_code=404,
            )
        return engine.resolve_price(product, variant, request.with_fringe_addon)


_catalog_service: Optional[CatalogService] = None


def get_catalog_service() -> CatalogService:
    """Process-wide catalog service."""
    global _catalog_service
    if _catalog_service is None:
        _catalog_service = CatalogService(CatalogClient())
    return _catalog_service
