"""
Custom Validators
Validation and normalisation for /pay input
"""

import math
import re
from typing import Optional

# Bounds on the normalised phone length
MIN_PHONE_LENGTH = 9
MAX_PHONE_LENGTH = 12

_DIGITS = re.compile(r'[0-9]+')

# Plain ASCII decimal; no sign, exponent, separators or surrounding space
_DECIMAL = re.compile(r'[0-9]+(\.[0-9]+)?')


def normalize_phone(phone: str) -> str:
    """
    Normalise a phone number to the 254XXXXXXXXX international form

    A leading 0 is replaced by 254; anything not already starting with
    254 gets it prepended. Safe for empty and very short input.

    Args:
        phone: Raw phone number from the request

    Returns:
        Normalised phone number
    """
    if phone.startswith('0'):
        return '254' + phone[1:]
    if not phone.startswith('254'):
        return '254' + phone
    return phone


def validate_phone_number(phone: str) -> tuple[bool, Optional[str]]:
    """
    Validate an already normalised phone number

    Args:
        phone: Normalised phone number

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not _DIGITS.fullmatch(phone):
        return False, "Phone number must contain only digits"

    if len(phone) < MIN_PHONE_LENGTH or len(phone) > MAX_PHONE_LENGTH:
        return False, "Invalid Phone Number"

    return True, None


def validate_amount(amount: str) -> tuple[bool, Optional[str]]:
    """
    Validate payment amount

    Args:
        amount: Amount as received in the request

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(amount, str) or not _DECIMAL.fullmatch(amount):
        return False, "Amount must be greater than 0"

    value = float(amount)
    if not math.isfinite(value) or value <= 0:
        return False, "Amount must be greater than 0"

    return True, None
