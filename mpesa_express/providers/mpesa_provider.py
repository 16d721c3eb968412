"""
M-Pesa Express Provider
Based on the Safaricom Daraja API.

Supported flows
---------------
STK Push (Lipa na M-Pesa Online)
    POST /mpesa/stkpush/v1/processrequest

Authentication
    GET  /oauth/v1/generate?grant_type=client_credentials  (Basic auth)
    A fresh token is requested for every push; nothing is cached.

Callback
    Safaricom POSTs the result to CallBackURL as
    {"Body": {"stkCallback": {...}}}. handle_callback() expects the
    payload already decoded by StkCallbackEnvelopeSchema.
"""

import base64
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple

import requests

from mpesa_express.providers.base import (
    PaymentProvider,
    PaymentInitializationError,
    TokenRetrievalError
)

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
DISPLAY_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class CallbackMetadata:
    """Typed view of CallbackMetadata.Item; None means absent or wrong type."""
    amount: Optional[float] = None
    receipt_number: Optional[str] = None
    transaction_date: Optional[int] = None
    phone_number: Optional[int] = None


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _as_integer(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _as_string(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


# Item name -> (CallbackMetadata attribute, coercion)
_METADATA_FIELDS = {
    "Amount":             ("amount", _as_number),
    "MpesaReceiptNumber": ("receipt_number", _as_string),
    "TransactionDate":    ("transaction_date", _as_integer),
    "PhoneNumber":        ("phone_number", _as_integer),
}


def extract_callback_metadata(items: Iterable[Dict[str, Any]]) -> CallbackMetadata:
    """
    Pull the known fields out of a Name/Value item list.

    Unknown names are ignored. A later item with the same name replaces
    an earlier one, including when its value has the wrong type.
    """
    metadata = CallbackMetadata()
    for item in items:
        field = _METADATA_FIELDS.get(item.get("Name", ""))
        if field is None:
            continue
        attr, coerce = field
        setattr(metadata, attr, coerce(item.get("Value")))
    return metadata


def format_transaction_date(transaction_date: Optional[int]) -> Optional[str]:
    """Render a yyyyMMddHHmmss number as 'YYYY-MM-DD HH:MM:SS', or None."""
    if transaction_date is None:
        return None

    raw = str(transaction_date)
    try:
        if len(raw) != 14:
            raise ValueError(f"expected 14 digits, got {len(raw)}")
        parsed = datetime.strptime(raw, TIMESTAMP_FORMAT)
    except ValueError as exc:
        logger.warning("Could not parse TransactionDate %s: %s", raw, exc)
        return None

    return parsed.strftime(DISPLAY_DATE_FORMAT)


class MPesaProvider(PaymentProvider):
    """M-Pesa Express (Daraja STK Push) adapter."""

    def __init__(self, settings):
        super().__init__(settings)
        self._session = requests.Session()

    # PaymentProvider ABC

    def get_access_token(self) -> str:
        """Request a new OAuth access token using the consumer key/secret."""
        try:
            resp = requests.get(
                self.settings.token_url,
                auth=(self.settings.consumer_key, self.settings.consumer_secret),
                timeout=self.settings.timeout,
            )
            logger.info("Token response status: %s", resp.status_code)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Failed to obtain access token: %s", exc)
            raise TokenRetrievalError("token retrieval failed") from exc

        token = data.get("access_token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            logger.error(
                "Access token not found in response (keys: %s)",
                sorted(data) if isinstance(data, dict) else type(data).__name__,
            )
            raise TokenRetrievalError("token retrieval failed")

        return token

    def initialize_payment(self, phone: str, amount: str) -> Tuple[int, Dict[str, Any]]:
        """
        Send an STK Push for an already validated phone and amount.

        Returns the provider's HTTP status and JSON body untouched so the
        caller can relay them. Any failure after the token is obtained
        raises PaymentInitializationError with the stage that failed.
        """
        token = self.get_access_token()
        payload = self.build_stk_payload(phone, amount)

        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as exc:
            raise PaymentInitializationError("Failed to marshal payload", stage="marshal") from exc

        logger.info("Sending payload: %s", json.dumps({**payload, "Password": "***"}))

        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type":  "application/json",
        }
        try:
            prepared = self._session.prepare_request(
                requests.Request("POST", self.settings.stk_push_url, data=body, headers=headers)
            )
        except (requests.RequestException, ValueError) as exc:
            raise PaymentInitializationError("Failed to create request", stage="request") from exc

        try:
            resp = self._session.send(prepared, timeout=self.settings.timeout, stream=True)
        except requests.RequestException as exc:
            raise PaymentInitializationError("Failed to send request", stage="send") from exc

        try:
            content = resp.content
        except requests.RequestException as exc:
            raise PaymentInitializationError("Failed to read response body", stage="read") from exc
        finally:
            resp.close()

        try:
            data = json.loads(content)
        except ValueError as exc:
            raise PaymentInitializationError("Failed to unmarshal response", stage="decode") from exc
        if not isinstance(data, dict):
            raise PaymentInitializationError("Failed to unmarshal response", stage="decode")

        logger.info("STK Push HTTP %s: %s", resp.status_code, data)
        return resp.status_code, data

    def handle_callback(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Acknowledge a decoded STK Push result notification."""
        stk = payload["Body"]["stkCallback"]
        logger.info("Callback data received: %s", payload)

        if stk["ResultCode"] != 0:
            logger.info(
                "Payment %s failed with ResultCode %s: %s",
                stk["CheckoutRequestID"], stk["ResultCode"], stk["ResultDesc"],
            )
            return {
                "status":  "failed",
                "message": stk["ResultDesc"],
            }

        metadata = extract_callback_metadata(stk["CallbackMetadata"]["Item"])
        logger.info("Amount: %s", metadata.amount)
        logger.info("Receipt Number: %s", metadata.receipt_number)
        logger.info("Transaction Date: %s", metadata.transaction_date)
        logger.info("Phone Number: %s", metadata.phone_number)
        logger.info("Formatted Date: %s", format_transaction_date(metadata.transaction_date))

        return {
            "status":  "success",
            "message": "Payment processed successfully",
            "receipt": metadata.receipt_number or "",
        }

    # Helpers

    def generate_password(self, timestamp: Optional[str] = None) -> Tuple[str, str]:
        """
        Generate the STK Push timestamp and password.

        Password = Base64(BusinessShortCode + Passkey + Timestamp)
        """
        timestamp = timestamp or datetime.now().strftime(TIMESTAMP_FORMAT)
        raw = f"{self.settings.shortcode}{self.settings.passkey}{timestamp}"
        password = base64.b64encode(raw.encode("utf-8")).decode("utf-8")
        return timestamp, password

    def build_stk_payload(self, phone: str, amount: str) -> Dict[str, Any]:
        """Assemble the processrequest body; password is fresh on every call."""
        timestamp, password = self.generate_password()
        return {
            "BusinessShortCode": self.settings.shortcode,
            "Password":          password,
            "Timestamp":         timestamp,
            "TransactionType":   self.settings.transaction_type,
            "Amount":            amount,
            "PartyA":            phone,
            "PartyB":            self.settings.shortcode,
            "PhoneNumber":       phone,
            "CallBackURL":       self.settings.callback_url,
            "AccountReference":  self.settings.account_reference,
            "TransactionDesc":   self.settings.transaction_desc,
        }
