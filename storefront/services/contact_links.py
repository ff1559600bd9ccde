"""
Messaging-app deep links used for custom orders and payment confirmation.
"""

from typing import Optional
from urllib.parse import quote

from storefront.core.config import config

WHATSAPP_BASE_URL = "https://wa.me"


def build_whatsapp_link(number: str, message: str) -> str:
    digits = "".join(ch for ch in number if ch.isdigit())
    return f"{WHATSAPP_BASE_URL}/{digits}?text={quote(message, safe='')}"


def custom_order_link(number: Optional[str] = None) -> str:
    """Pre-filled inquiry for bespoke garments, shown instead of a product grid."""
    return build_whatsapp_link(number or config.whatsapp_number, config.whatsapp_custom_order_message)


def order_confirmation_link(phone: str, number: Optional[str] = None) -> str:
    """Link the customer uses to send the payment receipt for an order."""
    # only {phone} is substituted; other braces in an operator template stay literal
    message = config.whatsapp_order_message.replace("{phone}", phone)
    return build_whatsapp_link(number or config.whatsapp_number, message)
