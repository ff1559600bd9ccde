"""
Configuration Validator
Checks environment variables before the application starts and fails fast
on invalid values.

NOTE: This module uses print() because it runs before the logger is
configured; the logger itself reads the validated values.
"""

import os
import sys
from datetime import datetime
from typing import List
from urllib.parse import urlparse


def _log(message: str, stream=sys.stdout, level: str = "INFO"):
    timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    print(f"[{timestamp}] {level} - {message}", file=stream)


def is_valid_url(url: str) -> bool:
    try:
        result = urlparse(url)
        return result.scheme in ("http", "https") and bool(result.netloc)
    except ValueError:
        return False


def is_valid_port(port: str) -> bool:
    try:
        port_num = int(port)
        return 0 < port_num <= 65535
    except (ValueError, TypeError):
        return False


def is_positive_number(value: str) -> bool:
    try:
        return float(value) > 0
    except (ValueError, TypeError):
        return False


def is_valid_boolean(value: str) -> bool:
    return value.lower() in ['true', 'false']


# Optional variables: only checked when set
VALIDATION_RULES = {
    'ENVIRONMENT': {
        'validator': lambda v: v.lower() in ['development', 'production', 'test', 'staging'],
        'error_message': 'ENVIRONMENT must be one of: development, production, test, staging',
    },
    'PORT': {
        'validator': is_valid_port,
        'error_message': 'PORT must be a valid port number (1-65535)',
    },
    'SERVICE_VERSION': {
        'validator': lambda v: len(v.split('.')) == 3,
        'error_message': 'SERVICE_VERSION must be in semantic version format (e.g., 1.0.0)',
    },
    'LOG_LEVEL': {
        'validator': lambda v: v.upper() in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        'error_message': 'LOG_LEVEL must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL',
    },
    'LOG_FORMAT': {
        'validator': lambda v: v.lower() in ['json', 'console'],
        'error_message': 'LOG_FORMAT must be either json or console',
    },
    'LOG_TO_CONSOLE': {
        'validator': is_valid_boolean,
        'error_message': 'LOG_TO_CONSOLE must be true or false',
    },
    'LOG_TO_FILE': {
        'validator': is_valid_boolean,
        'error_message': 'LOG_TO_FILE must be true or false',
    },
    'CATALOG_BASE_URL': {
        'validator': is_valid_url,
        'error_message': 'CATALOG_BASE_URL must be an http(s) URL',
    },
    'CATALOG_REVALIDATE_SECONDS': {
        'validator': lambda v: v.isdigit(),
        'error_message': 'CATALOG_REVALIDATE_SECONDS must be a non-negative integer',
    },
    'CATALOG_RETRY_SECONDS': {
        'validator': lambda v: v.isdigit(),
        'error_message': 'CATALOG_RETRY_SECONDS must be a non-negative integer',
    },
    'ORDER_WEBHOOK_URL': {
        'validator': is_valid_url,
        'error_message': 'ORDER_WEBHOOK_URL must be an http(s) URL',
    },
    'FRINGE_ADDON_FEE': {
        'validator': lambda v: v == '0' or is_positive_number(v),
        'error_message': 'FRINGE_ADDON_FEE must be a non-negative number',
    },
    'MONGODB_PORT': {
        'validator': is_valid_port,
        'error_message': 'MONGODB_PORT must be a valid port number',
    },
    'WHATSAPP_NUMBER': {
        'validator': lambda v: v.isdigit(),
        'error_message': 'WHATSAPP_NUMBER must contain digits only (country code included)',
    },
}


def collect_config_errors(environ=None) -> List[str]:
    """Return one message per invalid variable"""
    environ = os.environ if environ is None else environ
    errors = []
    for key, rule in VALIDATION_RULES.items():
        value = environ.get(key)
        if not value:
            continue
        if not rule['validator'](value):
            shown = value if len(value) <= 100 else f"{value[:100]}..."
            errors.append(f"{key}: {rule['error_message']} (current value: {shown})")
    if not environ.get('CATALOG_API_TOKEN'):
        _log('[CONFIG] CATALOG_API_TOKEN not set, catalog requests are unauthenticated', level="WARNING")
    return errors


def validate_config():
    """
    Validates environment variables according to the rules
    Raises SystemExit if any variable is invalid
    """
    _log('[CONFIG] Validating environment configuration...')

    errors = collect_config_errors()
    if errors:
        _log('[CONFIG] Configuration validation failed:', stream=sys.stderr, level="ERROR")
        for error in errors:
            _log(error, stream=sys.stderr, level="ERROR")
        sys.exit(1)

    _log('[CONFIG] Environment configuration is valid')
