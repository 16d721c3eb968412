"""
Callback API Endpoints
Receives the asynchronous STK Push result from Safaricom
"""

from flask import Blueprint, current_app, request, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import BadRequest

from mpesa_express.errors import InvalidPayloadError
from mpesa_express.providers import get_provider
from mpesa_express.schemas.callback_schema import StkCallbackEnvelopeSchema
from mpesa_express.utils.logger import get_logger

callbacks_bp = Blueprint('callbacks', __name__)
logger = get_logger(__name__)

envelope_schema = StkCallbackEnvelopeSchema()


@callbacks_bp.route('/callback', methods=['POST'])
def receive_callback():
    """
    Receive an STK Push result notification

    Body:
        {
            "Body": {
                "stkCallback": {
                    "MerchantRequestID": "29115-34620561-1",
                    "CheckoutRequestID": "ws_CO_191220191020363925",
                    "ResultCode": 0,
                    "ResultDesc": "The service request is processed successfully.",
                    "CallbackMetadata": {
                        "Item": [
                            {"Name": "Amount", "Value": 1.00},
                            {"Name": "MpesaReceiptNumber", "Value": "NLJ7RT61SV"},
                            {"Name": "TransactionDate", "Value": 20191219102115},
                            {"Name": "PhoneNumber", "Value": 254708374149}
                        ]
                    }
                }
            }
        }

    Always answers 200 once the body decodes; a failed payment is reported
    with "status": "failed". A JSON null body decodes as an empty
    notification.
    """
    try:
        payload = request.get_json(force=True)
    except BadRequest as e:
        logger.error(f'Failed to parse callback payload: {e.description}')
        raise InvalidPayloadError() from e

    if payload is not None and not isinstance(payload, dict):
        logger.error(f'Callback payload is a JSON {type(payload).__name__}, not an object')
        raise InvalidPayloadError()

    if current_app.config['CALLBACK_MODE'] == 'echo':
        logger.info(f'Callback data received: {payload}')
        return jsonify(payload), 200

    try:
        data = envelope_schema.load(payload or {})
    except ValidationError as e:
        logger.error(f'Callback payload does not match stkCallback shape: {e.messages}')
        raise InvalidPayloadError() from e

    return jsonify(get_provider().handle_callback(data)), 200
