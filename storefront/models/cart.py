"""
Cart Models

A cart holds line items keyed by product and chosen attributes. Adding a
line equal to an existing one (same product, same attributes) increases
its quantity instead of adding a new line.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.models.catalog import ProductType
from storefront.models.selection import SelectionRequest


class CartAttributes(BaseModel):
    """Attributes chosen for a cart line."""
    edition: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None
    fringe_addon: Optional[bool] = None
    gender: Optional[str] = None


class CartItemBase(BaseModel):
    product_id: str
    product_name: str
    price: float = Field(..., ge=0)
    quantity: int = Field(1, gt=0)
    type: ProductType
    attributes: CartAttributes = Field(default_factory=CartAttributes)
    image: str


class CartItem(CartItemBase):
    cart_id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def matches(self, other: CartItemBase) -> bool:
        return self.product_id == other.product_id and self.attributes == other.attributes


class Cart(BaseModel):
    """Cart contents of one session."""
    session_id: str
    items: List[CartItem] = Field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(item.line_total for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def add(self, new_item: CartItemBase) -> CartItem:
        """Add a line, merging into an equal line when one exists."""
        for index, item in enumerate(self.items):
            if item.matches(new_item):
                merged = item.model_copy(update={"quantity": item.quantity + new_item.quantity})
                self.items[index] = merged
                return merged

        added = CartItem(**new_item.model_dump())
        self.items.append(added)
        return added

    def remove(self, cart_id: str) -> bool:
        remaining = [item for item in self.items if item.cart_id != cart_id]
        removed = len(remaining) != len(self.items)
        self.items = remaining
        return removed

    def clear(self) -> None:
        self.items = []


class CartResponse(BaseModel):
    session_id: str
    items: List[CartItem]
    total: float
    item_count: int

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartResponse":
        return cls(
            session_id=cart.session_id,
            items=cart.items,
            total=cart.total,
            item_count=sum(item.quantity for item in cart.items),
        )


class AddToCartRequest(BaseModel):
    """Add a product to the cart as currently configured in the store."""
    product_id: str
    variant_id: Optional[str] = Field(None, description="Variant of the clicked media tile")
    size: Optional[str] = None
    quantity: int = Field(1, gt=0, le=99)
    with_fringe_addon: bool = False
    selection: SelectionRequest = Field(default_factory=SelectionRequest)


class PriceQuoteRequest(BaseModel):
    product_id: str
    variant_id: Optional[str] = None
    with_fringe_addon: bool = False


class PriceQuote(BaseModel):
    product_id: str
    variant_id: Optional[str] = None
    base_price: float
    addon_fee: float = 0.0
    unit_price: float
