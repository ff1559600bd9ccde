"""
Core module initialization
"""

from .config import config
from .errors import ErrorResponse, ErrorResponseModel, error_response_handler, http_exception_handler
from .logger import logger

__all__ = [
    "config",
    "ErrorResponse",
    "ErrorResponseModel",
    "error_response_handler",
    "http_exception_handler",
    "logger",
]
