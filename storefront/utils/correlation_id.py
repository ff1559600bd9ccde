"""
Correlation ID utilities for request tracing
"""

import uuid
from contextvars import ContextVar
from typing import Dict, Optional

correlation_id_context: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """Get the correlation ID of the current context, if any"""
    return correlation_id_context.get()


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_context.set(correlation_id)


def create_correlation_id() -> str:
    return str(uuid.uuid4())


def create_headers_with_correlation_id(
    additional_headers: Optional[Dict[str, str]] = None,
    header_name: str = "X-Correlation-ID",
) -> Dict[str, str]:
    """
    Create headers carrying the current correlation ID for outgoing requests

    Args:
        additional_headers: Optional additional headers to include
        header_name: Header used to propagate the correlation ID

    Returns:
        dict: Headers dictionary with correlation ID
    """
    headers = {header_name: get_correlation_id() or create_correlation_id()}
    if additional_headers:
        headers.update(additional_headers)
    return headers
