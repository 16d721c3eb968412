from mpesa_express.providers.base import PaymentProvider
from mpesa_express.providers.mpesa_provider import MPesaProvider
from flask import current_app

EXTENSION_KEY = 'mpesa_express.provider'


def init_provider(app, settings) -> PaymentProvider:
    """
    Build the provider once at startup and attach it to the app.

    Args:
        app: Flask application instance
        settings: Immutable provider settings
    """
    provider = MPesaProvider(settings)
    app.extensions[EXTENSION_KEY] = provider
    return provider


def get_provider() -> PaymentProvider:
    """Return the provider bound to the current app."""
    return current_app.extensions[EXTENSION_KEY]


__all__ = ['init_provider', 'get_provider']
