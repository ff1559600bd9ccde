"""
Order Webhook Client
Posts submitted orders to the order-processing webhook.
"""

from typing import Optional

import httpx

from storefront.core.config import config
from storefront.core.logger import logger
from storefront.models.order import OrderPayload
from storefront.utils.service_client import ServiceClient


class WebhookDeliveryError(Exception):
    """The webhook could not be reached or rejected the order."""


class OrderWebhookClient:
    """Client for the order webhook. Only success or failure is consumed."""

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url or config.order_webhook_url
        self.http = ServiceClient(
            timeout=timeout or config.order_webhook_timeout_seconds,
            transport=transport,
        )

    async def submit(self, payload: OrderPayload) -> None:
        """
        Deliver an order.

        Raises:
            WebhookDeliveryError: On transport errors or non-2xx responses
        """
        logger.info(
            "Submitting order to webhook",
            metadata={
                "event": "order_webhook_submit",
                "items": len(payload.items),
                "total": payload.total,
            },
        )
        try:
            response = await self.http.post(self.url, data=payload.model_dump(mode="json"))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Order webhook rejected the order with status {e.response.status_code}",
                error=e,
                metadata={"event": "order_webhook_rejected", "status_code": e.response.status_code},
            )
            raise WebhookDeliveryError(f"Webhook responded {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(
                "Order webhook unreachable",
                error=e,
                metadata={"event": "order_webhook_unreachable"},
            )
            raise WebhookDeliveryError(str(e) or type(e).__name__) from e
