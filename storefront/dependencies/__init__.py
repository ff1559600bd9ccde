"""
FastAPI dependency providers
"""

from fastapi import Depends

from storefront.clients.webhook_client import OrderWebhookClient
from storefront.db.mongodb import get_cart_collection
from storefront.repositories.cart_repository import CartRepository
from storefront.services.cart_service import CartService
from storefront.services.catalog_service import CatalogService, get_catalog_service
from storefront.services.checkout_service import CheckoutService


async def get_cart_repository(collection=Depends(get_cart_collection)) -> CartRepository:
    return CartRepository(collection)


def get_webhook_client() -> OrderWebhookClient:
    return OrderWebhookClient()


async def get_cart_service(
    repository: CartRepository = Depends(get_cart_repository),
    catalog: CatalogService = Depends(get_catalog_service),
) -> CartService:
    return CartService(repository, catalog)


async def get_checkout_service(
    repository: CartRepository = Depends(get_cart_repository),
    webhook: OrderWebhookClient = Depends(get_webhook_client),
) -> CheckoutService:
    return CheckoutService(repository, webhook)


__all__ = [
    "get_cart_repository",
    "get_cart_service",
    "get_catalog_service",
    "get_checkout_service",
    "get_webhook_client",
]
