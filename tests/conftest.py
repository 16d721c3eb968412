"""
Pytest Configuration and Fixtures
"""

import pytest

from mpesa_express import create_app
from mpesa_express.providers import get_provider


@pytest.fixture(scope='session')
def app():
    """Create application for testing"""
    app = create_app('testing')

    # Establish application context
    ctx = app.app_context()
    ctx.push()

    yield app

    ctx.pop()


@pytest.fixture(scope='function')
def client(app):
    """Create a test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def provider(app):
    """The MPesaProvider bound to the test app"""
    return get_provider()


@pytest.fixture(scope='function')
def echo_client():
    """Test client for the echo deployment profile"""
    app = create_app('testing', overrides={'CALLBACK_MODE': 'echo'})
    return app.test_client()


@pytest.fixture
def success_callback():
    """A successful STK Push result as Safaricom sends it"""
    return {
        'Body': {
            'stkCallback': {
                'MerchantRequestID': '29115-34620561-1',
                'CheckoutRequestID': 'ws_CO_191220191020363925',
                'ResultCode': 0,
                'ResultDesc': 'The service request is processed successfully.',
                'CallbackMetadata': {
                    'Item': [
                        {'Name': 'Amount', 'Value': 1.00},
                        {'Name': 'MpesaReceiptNumber', 'Value': 'NLJ7RT61SV'},
                        {'Name': 'Balance'},
                        {'Name': 'TransactionDate', 'Value': 20191219102115},
                        {'Name': 'PhoneNumber', 'Value': 254708374149}
                    ]
                }
            }
        }
    }
