"""
Catalog Router
Products, the selection cascade, price quotes and the add-on upsell.
"""

from fastapi import APIRouter, Depends

from storefront.core.logger import logger
from storefront.models.catalog import CatalogSnapshot
from storefront.models.cart import PriceQuote, PriceQuoteRequest
from storefront.models.selection import SelectionRequest, SelectionView
from storefront.services.catalog_service import CatalogService, get_catalog_service
from storefront.services.contact_links import custom_order_link

router = APIRouter()


@router.get("/products", response_model=CatalogSnapshot)
async def list_products(catalog: CatalogService = Depends(get_catalog_service)):
    """Normalized products, served from the revalidated cache"""
    return await catalog.snapshot()


@router.post("/refresh", response_model=CatalogSnapshot)
async def refresh_catalog(catalog: CatalogService = Depends(get_catalog_service)):
    """Reload the catalog from the record API now"""
    snapshot = await catalog.snapshot(force=True)
    logger.info(
        "Catalog refreshed on demand",
        metadata={"event": "catalog_refreshed", "products": snapshot.product_count},
    )
    return snapshot


@router.post("/browse", response_model=SelectionView)
async def browse(
    request: SelectionRequest,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    Apply a selection tuple top-down and return the derived view:
    available options per level plus the media (or accessories) to show.
    """
    return await catalog.browse(request)


@router.post("/quote", response_model=PriceQuote)
async def quote(
    request: PriceQuoteRequest,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.quote(request)


@router.get("/addon")
async def fringe_addon(catalog: CatalogService = Depends(get_catalog_service)):
    """Image and flat fee of the fringe add-on offered with garments"""
    return await catalog.get_fringe_addon()


@router.get("/custom-order")
async def custom_order():
    return {"link": custom_order_link()}
