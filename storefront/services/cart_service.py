"""
Cart Service

Turns an add-to-cart action in the store into a cart line and keeps the
session's cart in storage.
"""

from typing import Optional

from storefront.core.config import config
from storefront.core.errors import ErrorResponse
from storefront.core.logger import logger
from storefront.models.catalog import Garment, Product, Variant
from storefront.models.cart import AddToCartRequest, Cart, CartAttributes, CartItemBase
from storefront.models.selection import MediaTile
from storefront.repositories.cart_repository import CartRepository
from storefront.services.catalog_service import CatalogService
from storefront.services.selection_engine import SelectionEngine, is_custom_edition

DEFAULT_SIZE = "M"


class CartService:
    """Cart operations for browsing sessions."""

    def __init__(self, repository: CartRepository, catalog: CatalogService):
        self.repository = repository
        self.catalog = catalog

    async def get_cart(self, session_id: str) -> Cart:
        return await self.repository.load(session_id)

    async def add_item(self, session_id: str, request: AddToCartRequest) -> Cart:
        engine = await self.catalog.build_engine()
        engine.apply_request(request.selection)

        product, variant = engine.resolve_variant(request.product_id, request.variant_id)
        if product is None:
            raise ErrorResponse(f"Product {request.product_id} not found", status_code=404)
        if request.variant_id is not None and variant is None:
            raise ErrorResponse(
                f"Variant {request.variant_id} not found for product {request.product_id}",
                status_code=404,
            )

        item = self.build_item(
            engine,
            product,
            variant,
            size=request.size,
            quantity=request.quantity,
            with_fringe_addon=request.with_fringe_addon,
        )

        cart = await self.repository.add_line(session_id, item)
        line = next((existing for existing in cart.items if existing.matches(item)), None)

        logger.info(
            f"Added {item.quantity} x {item.product_name} to cart",
            metadata={
                "event": "cart_item_added",
                "session_id": session_id,
                "product_id": item.product_id,
                "cart_id": line.cart_id if line else None,
                "line_quantity": line.quantity if line else None,
            },
        )
        return cart

    def build_item(
        self,
        engine: SelectionEngine,
        product: Product,
        variant: Optional[Variant] = None,
        size: Optional[str] = None,
        quantity: int = 1,
        with_fringe_addon: bool = False,
    ) -> CartItemBase:
        """
        Build a cart line for a product as configured in the engine.

        Accessories default to their first variant and never carry the
        add-on. Garment attributes come from the active selection, falling
        back to the clicked variant.
        """
        state = engine.state
        is_garment = isinstance(product, Garment)

        if not is_garment and variant is None and product.variants:
            variant = product.variants[0]

        quote = engine.resolve_price(product, variant, with_fringe_addon and is_garment)

        if is_garment:
            edition = state.edition or (variant.edition if variant else None)
            attributes = CartAttributes(
                edition=edition,
                model=state.model or (variant.model if variant else None),
                color=state.color or (variant.color if variant else None),
                size=size or (product.sizes[0] if product.sizes else DEFAULT_SIZE),
                fringe_addon=with_fringe_addon,
                gender=state.gender or (variant.gender if variant else None),
            )
            name = f"Camisa {edition or product.display_name}"
            if is_custom_edition(edition, engine.custom_edition):
                name = f"{name} ({config.custom_edition})"
        else:
            attributes = CartAttributes(gender=state.gender or (variant.gender if variant else None))
            name = product.display_name

        return CartItemBase(
            product_id=product.id,
            product_name=name,
            price=quote.unit_price,
            quantity=quantity,
            type=product.type,
            attributes=attributes,
            image=self._image_for(engine, variant),
        )

    @staticmethod
    def _image_for(engine: SelectionEngine, variant: Optional[Variant]) -> str:
        if variant is not None and variant.media:
            return variant.media[0].source
        for item in engine.displayed_media():
            if isinstance(item, MediaTile):
                return item.source
        return config.media_placeholder

    async def remove_item(self, session_id: str, cart_id: str) -> Cart:
        if not await self.repository.remove_line(session_id, cart_id):
            raise ErrorResponse(f"Cart item {cart_id} not found", status_code=404)
        return await self.repository.load(session_id)

    async def clear(self, session_id: str) -> Cart:
        cart = await self.repository.load(session_id)
        cart.clear()
        return await self.repository.save(cart)
