import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from mpesa_express.errors.exceptions import ConfigurationError

# Environment variables that must be present before the relay can start
REQUIRED_ENV_VARS = (
    'MPESA_CONSUMER_KEY',
    'MPESA_CONSUMER_SECRET',
    'MPESA_SHORTCODE',
    'MPESA_PASS_KEY',
    'MPESA_TOKEN_URL',
)


def load_environment(dotenv_path: Optional[str] = None) -> str:
    """
    Load the .env file into the process environment

    Args:
        dotenv_path: Explicit path to the file; searched upwards from the
            working directory when omitted

    Returns:
        Path of the loaded file

    Raises:
        ConfigurationError: If the file cannot be found or loaded
    """
    path = dotenv_path or find_dotenv(usecwd=True)
    if not path or not load_dotenv(path):
        raise ConfigurationError('Error loading .env file')
    return path


def read_environment() -> dict:
    """Read credentials and LOG_DIR once the .env file has been loaded."""
    values = {name: os.getenv(name, '') for name in REQUIRED_ENV_VARS}
    timeout = os.getenv('MPESA_TIMEOUT')
    if timeout:
        try:
            values['MPESA_TIMEOUT'] = float(timeout)
        except ValueError as exc:
            raise ConfigurationError(f'MPESA_TIMEOUT must be a number, got {timeout!r}') from exc
    if os.getenv('LOG_DIR') is not None:
        values['LOG_DIR'] = os.getenv('LOG_DIR')
    return values


class Config:
    """Base configuration"""
    SERVICE_NAME = "Spookie's Mpesa Integration Service"
    LOAD_DOTENV = True
    PORT = 3000

    # Public base URL Safaricom posts results to; '/callback' is appended
    CALLBACK_BASE_URL = 'https://webhook.site/9e1a6307-9adc-465b-a37b-78db245785a7'
    CALLBACK_MODE = 'structured'

    MPESA_STK_PUSH_URL = 'https://sandbox.safaricom.co.ke/mpesa/stkpush/v1/processrequest'
    MPESA_TRANSACTION_TYPE = 'CustomerPayBillOnline'
    MPESA_ACCOUNT_REFERENCE = 'Marps Africa'
    MPESA_TRANSACTION_DESC = 'Payment Testing'
    MPESA_TIMEOUT = 30.0

    # Overridden by LOG_DIR from the environment or .env
    LOG_DIR = 'logs'


class PrimaryConfig(Config):
    """Structured callback handling on port 3000"""
    DEBUG = False
    TESTING = False


class EchoConfig(Config):
    """Echoes callbacks back verbatim on port 5000"""
    DEBUG = False
    TESTING = False
    PORT = 5000
    CALLBACK_BASE_URL = 'https://sms-api.marps.co.ke'
    CALLBACK_MODE = 'echo'


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    LOAD_DOTENV = False
    CALLBACK_BASE_URL = 'https://callbacks.example.test'
    LOG_DIR = ''

    MPESA_CONSUMER_KEY = 'test_consumer_key'
    MPESA_CONSUMER_SECRET = 'test_consumer_secret'
    MPESA_SHORTCODE = '174379'
    MPESA_PASS_KEY = 'test_passkey'
    MPESA_TOKEN_URL = 'https://sandbox.safaricom.co.ke/oauth/v1/generate?grant_type=client_credentials'


config = {
    'primary': PrimaryConfig,
    'echo': EchoConfig,
    'testing': TestingConfig,
    'default': PrimaryConfig
}


@dataclass(frozen=True)
class MpesaSettings:
    """Immutable provider settings, built once at startup."""
    consumer_key: str
    consumer_secret: str
    shortcode: str
    passkey: str
    token_url: str
    stk_push_url: str
    callback_url: str
    transaction_type: str
    account_reference: str
    transaction_desc: str
    timeout: float

    @classmethod
    def from_config(cls, app_config: Mapping[str, Any]) -> 'MpesaSettings':
        """
        Build settings from a Flask config mapping

        Raises:
            ConfigurationError: If a required value is missing or empty
        """
        missing = [name for name in REQUIRED_ENV_VARS if not app_config.get(name)]
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

        return cls(
            consumer_key=app_config['MPESA_CONSUMER_KEY'],
            consumer_secret=app_config['MPESA_CONSUMER_SECRET'],
            shortcode=str(app_config['MPESA_SHORTCODE']),
            passkey=app_config['MPESA_PASS_KEY'],
            token_url=app_config['MPESA_TOKEN_URL'],
            stk_push_url=app_config['MPESA_STK_PUSH_URL'],
            callback_url=app_config['CALLBACK_BASE_URL'].rstrip('/') + '/callback',
            transaction_type=app_config['MPESA_TRANSACTION_TYPE'],
            account_reference=app_config['MPESA_ACCOUNT_REFERENCE'],
            transaction_desc=app_config['MPESA_TRANSACTION_DESC'],
            timeout=float(app_config.get('MPESA_TIMEOUT', Config.MPESA_TIMEOUT)),
        )
