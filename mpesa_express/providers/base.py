from abc import ABC, abstractmethod
from typing import Dict, Any, Tuple


class PaymentProvider(ABC):
    """Abstract base class for push-payment providers"""

    def __init__(self, settings):
        """
        Initialize provider with configuration

        Args:
            settings: Immutable provider settings
        """
        self.settings = settings

    @abstractmethod
    def get_access_token(self) -> str:
        """
        Obtain a bearer token for the next provider call

        Returns:
            Opaque access token string
        """
        pass

    @abstractmethod
    def initialize_payment(self, phone: str, amount: str) -> Tuple[int, Dict[str, Any]]:
        """
        Send a push-payment prompt to the customer's phone

        Args:
            phone: Normalised customer phone number
            amount: Amount as received from the merchant

        Returns:
            Tuple of (provider HTTP status, provider JSON body)
        """
        pass

    @abstractmethod
    def handle_callback(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process a decoded result notification

        Args:
            payload: Decoded callback payload

        Returns:
            Acknowledgement body to return to the provider
        """
        pass


class PaymentProviderError(Exception):
    """Base exception for provider errors"""
    pass


class TokenRetrievalError(PaymentProviderError):
    """Raised when the access token cannot be obtained"""
    pass


class PaymentInitializationError(PaymentProviderError):
    """Raised when the push request cannot be sent or its response decoded"""

    def __init__(self, message: str, stage: str):
        super().__init__(message)
        self.stage = stage
