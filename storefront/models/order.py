"""
Order Models

Payload posted to the order webhook at checkout.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from storefront.models.cart import Cart, CartAttributes


class Customer(BaseModel):
    phone: str


class OrderLine(BaseModel):
    product: str
    quantity: int
    price: float
    attributes: CartAttributes


class OrderPayload(BaseModel):
    customer: Customer
    items: List[OrderLine]
    total: float
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    )

    @classmethod
    def from_cart(cls, cart: Cart, phone: str) -> "OrderPayload":
        return cls(
            customer=Customer(phone=phone),
            items=[
                OrderLine(
                    product=item.product_name,
                    quantity=item.quantity,
                    price=item.price,
                    attributes=item.attributes,
                )
                for item in cart.items
            ],
            total=cart.total,
        )


class CheckoutRequest(BaseModel):
    phone: str = Field(..., description="Customer phone number")

    @field_validator("phone")
    @classmethod
    def strip_phone(cls, v):
        return v.strip()


class CheckoutResult(BaseModel):
    order_generated: bool
    total: float
    item_count: int
    confirmation_link: Optional[str] = None
