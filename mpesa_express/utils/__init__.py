"""
Utils Package
Utility functions and helpers
"""

from mpesa_express.utils.logger import get_logger, configure_app_logging, RequestLogger
from mpesa_express.utils.validators import (
    normalize_phone,
    validate_phone_number,
    validate_amount
)

__all__ = [
    'get_logger',
    'configure_app_logging',
    'RequestLogger',
    'normalize_phone',
    'validate_phone_number',
    'validate_amount'
]
