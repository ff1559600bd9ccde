from .correlation_id import (
    create_correlation_id,
    create_headers_with_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from .service_client import ServiceClient

__all__ = [
    "create_correlation_id",
    "create_headers_with_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
    "ServiceClient",
]
