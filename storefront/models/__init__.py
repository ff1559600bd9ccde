"""
Models package for the Storefront service.
"""

from .catalog import (
    Accessory,
    CatalogSnapshot,
    Garment,
    MediaItem,
    MediaKind,
    Product,
    ProductType,
    Variant,
)
from .raw_records import (
    AccessoryRecord,
    AddonRecord,
    Attachment,
    GarmentRecord,
    RecordKind,
    parse_addon_record,
    parse_raw_record,
)
from .selection import (
    LEVEL_ORDER,
    MediaTile,
    SelectionLevel,
    SelectionRequest,
    SelectionState,
    SelectionView,
)
from .cart import (
    AddToCartRequest,
    Cart,
    CartAttributes,
    CartItem,
    CartItemBase,
    CartResponse,
    PriceQuote,
    PriceQuoteRequest,
)
from .order import CheckoutRequest, CheckoutResult, Customer, OrderLine, OrderPayload

__all__ = [
    "Accessory",
    "CatalogSnapshot",
    "Garment",
    "MediaItem",
    "MediaKind",
    "Product",
    "ProductType",
    "Variant",
    "AccessoryRecord",
    "AddonRecord",
    "Attachment",
    "GarmentRecord",
    "RecordKind",
    "parse_addon_record",
    "parse_raw_record",
    "LEVEL_ORDER",
    "MediaTile",
    "SelectionLevel",
    "SelectionRequest",
    "SelectionState",
    "SelectionView",
    "AddToCartRequest",
    "Cart",
    "CartAttributes",
    "CartItem",
    "CartItemBase",
    "CartResponse",
    "PriceQuote",
    "PriceQuoteRequest",
    "CheckoutRequest",
    "CheckoutResult",
    "Customer",
    "OrderLine",
    "OrderPayload",
]
