"""
Integration Tests for /pay
"""

import json
from unittest.mock import Mock, patch

import pytest
import requests

from mpesa_express.providers.base import PaymentInitializationError


def _mock_http_response(json_data, status_code=200):
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = json_data
    resp.content = json.dumps(json_data).encode('utf-8')
    return resp


TOKEN_RESPONSE = {'access_token': 'daraja_tok_abc', 'expires_in': '3599'}
STK_ACCEPTED = {
    'MerchantRequestID': '29115-34620561-1',
    'CheckoutRequestID': 'ws_CO_191220191020363925',
    'ResponseCode': '0',
    'ResponseDescription': 'Success. Request accepted for processing',
    'CustomerMessage': 'Success. Request accepted for processing'
}


class TestPayEndpoint:
    """End-to-end /pay with the Daraja HTTP calls mocked"""

    def test_get_pay_normalises_phone_and_relays_response(self, client, provider):
        with patch('requests.get', return_value=_mock_http_response(TOKEN_RESPONSE)) as mock_get, \
                patch.object(provider._session, 'send', return_value=_mock_http_response(STK_ACCEPTED)) as mock_send:

            response = client.get('/pay?phone=0712345678&amount=10')

        assert response.status_code == 200
        assert response.get_json() == STK_ACCEPTED

        mock_get.assert_called_once()
        sent = json.loads(mock_send.call_args[0][0].body)
        assert sent['PartyA'] == '254712345678'
        assert sent['PhoneNumber'] == '254712345678'
        assert sent['Amount'] == '10'
        assert sent['CallBackURL'] == 'https://callbacks.example.test/callback'

    def test_post_pay_reads_form_fields(self, client, provider):
        with patch('requests.get', return_value=_mock_http_response(TOKEN_RESPONSE)), \
                patch.object(provider._session, 'send', return_value=_mock_http_response(STK_ACCEPTED)) as mock_send:

            response = client.post('/pay', data={'phone': '712345678', 'amount': '250.50'})

        assert response.status_code == 200
        sent = json.loads(mock_send.call_args[0][0].body)
        assert sent['PhoneNumber'] == '254712345678'
        assert sent['Amount'] == '250.50'

    def test_post_pay_ignores_query_string(self, client):
        response = client.post('/pay?phone=0712345678&amount=10')

        assert response.status_code == 400
        assert response.get_json() == {'message': 'phone and amount are required'}

    def test_provider_error_status_is_passed_through(self, client, provider):
        error_body = {'requestId': '1234', 'errorCode': '404.001.03', 'errorMessage': 'Invalid Access Token'}

        with patch('requests.get', return_value=_mock_http_response(TOKEN_RESPONSE)), \
                patch.object(provider._session, 'send', return_value=_mock_http_response(error_body, 404)):

            response = client.get('/pay?phone=254712345678&amount=10')

        assert response.status_code == 404
        assert response.get_json() == error_body

    @pytest.mark.parametrize('query', [
        '/pay',
        '/pay?phone=&amount=10',
        '/pay?phone=0712345678',
        '/pay?phone=0712345678&amount=',
    ])
    def test_missing_fields(self, client, query):
        with patch('requests.get') as mock_get:
            response = client.get(query)

        assert response.status_code == 400
        assert response.get_json() == {'message': 'phone and amount are required'}
        mock_get.assert_not_called()

    @pytest.mark.parametrize('phone', ['07123abc78', '+254712345678', '0712 345678'])
    def test_non_digit_phone(self, client, phone):
        response = client.get('/pay', query_string={'phone': phone, 'amount': '10'})

        assert response.status_code == 400
        assert response.get_json() == {'error': 'Phone number must contain only digits'}

    @pytest.mark.parametrize('phone', ['0712', '07123456789', '2547123456789'])
    def test_phone_length_out_of_bounds(self, client, phone):
        response = client.get('/pay', query_string={'phone': phone, 'amount': '10'})

        assert response.status_code == 400
        assert response.get_json() == {'error': 'Invalid Phone Number'}

    @pytest.mark.parametrize('amount', [
        '0', '-5', 'ten', 'nan',
        ' 10', '10\n', '1_000', '\u0661\u0660',
    ])
    def test_invalid_amount(self, client, amount):
        with patch('requests.get') as mock_get:
            response = client.get('/pay', query_string={'phone': '0712345678', 'amount': amount})

        assert response.status_code == 400
        assert response.get_json() == {'error': 'Amount must be greater than 0'}
        mock_get.assert_not_called()

    def test_phone_checked_before_amount(self, client):
        response = client.get('/pay', query_string={'phone': 'abc', 'amount': '0'})

        assert response.get_json() == {'error': 'Phone number must contain only digits'}

    def test_token_failure(self, client, provider):
        with patch('requests.get', side_effect=requests.ConnectionError('down')), \
                patch.object(provider._session, 'send') as mock_send:

            response = client.get('/pay?phone=0712345678&amount=10')

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Failed to get access token'}
        mock_send.assert_not_called()

    def test_network_failure(self, client, provider):
        with patch('requests.get', return_value=_mock_http_response(TOKEN_RESPONSE)), \
                patch.object(provider._session, 'send', side_effect=requests.ConnectionError('reset')):

            response = client.get('/pay?phone=0712345678&amount=10')

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Failed to send request'}

    def test_undecodable_response(self, client, provider):
        bad = Mock(status_code=502, content=b'<html>Bad Gateway</html>')

        with patch('requests.get', return_value=_mock_http_response(TOKEN_RESPONSE)), \
                patch.object(provider._session, 'send', return_value=bad):

            response = client.get('/pay?phone=0712345678&amount=10')

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Failed to unmarshal response'}

    @pytest.mark.parametrize('message', [
        'Failed to marshal payload',
        'Failed to create request',
        'Failed to read response body',
    ])
    def test_other_initiation_failures_map_to_500(self, client, provider, message):
        with patch.object(provider, 'initialize_payment',
                          side_effect=PaymentInitializationError(message, stage='test')):
            response = client.get('/pay?phone=0712345678&amount=10')

        assert response.status_code == 500
        assert response.get_json() == {'error': message}

    def test_unsupported_method(self, client):
        response = client.put('/pay?phone=0712345678&amount=10')

        assert response.status_code == 405


class TestLiveness:

    @pytest.mark.parametrize('method', ['get', 'post', 'put', 'delete', 'patch'])
    def test_index_answers_any_method(self, client, method):
        response = getattr(client, method)('/')

        assert response.status_code == 200
        assert response.get_data(as_text=True) == "Spookie's Mpesa Integration Service"

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        data = response.get_json()
        assert data['status'] == 'alive'
        assert data['service'] == "Spookie's Mpesa Integration Service"

    def test_unknown_route_is_json(self, client):
        response = client.get('/does-not-exist')

        assert response.status_code == 404
        assert response.get_json()['error'] == 'Not Found'
