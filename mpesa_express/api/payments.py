"""
Payment API Endpoints
Triggers an M-Pesa Express prompt on the customer's phone
"""

from flask import Blueprint, request, jsonify

from mpesa_express.errors import MissingFieldsError, ValidationError, UpstreamError
from mpesa_express.providers import get_provider
from mpesa_express.providers.base import PaymentInitializationError, TokenRetrievalError
from mpesa_express.utils.logger import get_logger
from mpesa_express.utils.validators import normalize_phone, validate_phone_number, validate_amount

payments_bp = Blueprint('payments', __name__)
logger = get_logger(__name__)


def _read_pay_params():
    """phone and amount come from the query string on GET, the form on POST."""
    source = request.form if request.method == 'POST' else request.args
    return source.get('phone', ''), source.get('amount', '')


@payments_bp.route('/pay', methods=['GET', 'POST'])
def pay():
    """
    Initiate an STK Push

    Query (GET) / Form (POST):
        - phone: Customer phone, e.g. 0712345678 or 254712345678
        - amount: Amount to charge, must be > 0

    Returns:
        The provider's status code and JSON body, unchanged
    """
    phone, amount = _read_pay_params()

    if not phone or not amount:
        raise MissingFieldsError('phone and amount are required')

    phone = normalize_phone(phone)

    valid, error = validate_phone_number(phone)
    if not valid:
        raise ValidationError(error)

    valid, error = validate_amount(amount)
    if not valid:
        raise ValidationError(error)

    provider = get_provider()
    try:
        status_code, result = provider.initialize_payment(phone, amount)
    except TokenRetrievalError as e:
        logger.error(f'STK Push aborted, no access token: {e.__cause__ or e}')
        raise UpstreamError('Failed to get access token') from e
    except PaymentInitializationError as e:
        logger.error(f'STK Push failed at {e.stage}: {e.__cause__ or e}')
        raise UpstreamError(str(e)) from e

    return jsonify(result), status_code
