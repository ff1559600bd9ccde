"""
Services package for the Storefront service.
"""

from .catalog_normalizer import CatalogNormalizer, normalize
from .selection_engine import SelectionEngine, is_custom_edition
from .catalog_service import CatalogService, get_catalog_service
from .cart_service import CartService
from .checkout_service import CheckoutService

__all__ = [
    "CatalogNormalizer",
    "normalize",
    "SelectionEngine",
    "is_custom_edition",
    "CatalogService",
    "get_catalog_service",
    "CartService",
    "CheckoutService",
]
