"""
Logging utility functions and helpers.
"""

import logging
from typing import Any, Dict


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Usage:
        from utils.logger import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


SENSITIVE_FIELDS = {
    'password', 'token', 'secret', 'api_key', 'authorization',
    'securehash', 'secure_hash', 'card_number', 'cvv', 'bank_account'
}


def sanitize_log_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Remove sensitive information from log data.

    Used before logging request bodies and gateway callbacks, which carry
    tokens and signature hashes.

    Args:
        data: Dictionary that may contain sensitive fields

    Returns:
        Sanitized copy safe for logging
    """
    sanitized = data.copy()

    for key, value in sanitized.items():
        normalized = key.lower().replace("vnp_", "")
        if any(sensitive in normalized for sensitive in SENSITIVE_FIELDS):
            if isinstance(value, str):
                # Keep a short prefix of tokens/hashes for correlation
                if ('token' in normalized or 'hash' in normalized) and len(value) > 8:
                    sanitized[key] = f"{value[:8]}..."
                else:
                    sanitized[key] = "***REDACTED***"

        elif isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value)

    return sanitized
