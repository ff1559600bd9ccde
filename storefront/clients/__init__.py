from .catalog_client import CatalogClient
from .webhook_client import OrderWebhookClient, WebhookDeliveryError

__all__ = ["CatalogClient", "OrderWebhookClient", "WebhookDeliveryError"]
