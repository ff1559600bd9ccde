"""
Checkout Service

Submits a session's cart as an order to the order webhook. A failed
submission leaves the cart untouched so the customer can retry.
"""

from storefront.clients.webhook_client import OrderWebhookClient, WebhookDeliveryError
from storefront.core.config import config
from storefront.core.errors import ErrorResponse
from storefront.core.logger import logger
from storefront.models.order import CheckoutResult, OrderPayload
from storefront.repositories.cart_repository import CartRepository
from storefront.services.contact_links import order_confirmation_link


class CheckoutService:

    def __init__(self, repository: CartRepository, webhook: OrderWebhookClient):
        self.repository = repository
        self.webhook = webhook

    async def submit(self, session_id: str, phone: str) -> CheckoutResult:
        phone = phone.strip()
        if len(phone) < config.min_phone_length:
            raise ErrorResponse(
                f"Phone number must have at least {config.min_phone_length} characters",
                status_code=400,
                details={"field": "phone"},
            )

        cart = await self.repository.load(session_id)
        if cart.is_empty:
            raise ErrorResponse("Cart is empty", status_code=400, details={"session_id": session_id})

        payload = OrderPayload.from_cart(cart, phone)
        try:
            await self.webhook.submit(payload)
        except WebhookDeliveryError as e:
            raise ErrorResponse(
                "The order could not be generated. Please try again.",
                status_code=502,
                details={"retryable": True, "reason": str(e)},
            )

        logger.info(
            "Order generated",
            metadata={
                "event": "order_generated",
                "session_id": session_id,
                "items": len(payload.items),
                "total": payload.total,
            },
        )
        return CheckoutResult(
            order_generated=True,
            total=payload.total,
            item_count=sum(line.quantity for line in payload.items),
            confirmation_link=order_confirmation_link(phone),
        )
