"""
API tests for the payment gateway endpoints
"""
from unittest.mock import patch

from app.services.payment_service import PaymentError
from conftest import ORDER_ID


class TestPaymentsAPI:

    @patch('app.api.payments.PaymentService')
    def test_jazzcash_form(self, MockService, client):
        MockService.return_value.create_jazzcash_payment.return_value = {
            'payment_url': 'https://sandbox.jazzcash.com.pk/pay',
            'form_data': {'pp_Amount': '250000'},
            'order_number': 'TS-20250110-ABC123',
        }

        response = client.post('/api/v1/payments/jazzcash', json={'orderId': ORDER_ID, 'amount': 2500})

        assert response.status_code == 200
        assert response.json()['data']['form_data']['pp_Amount'] == '250000'
        order_id, amount, currency = MockService.return_value.create_jazzcash_payment.call_args[0]
        assert order_id == ORDER_ID
        assert amount == 2500
        assert currency == 'PKR'

    @patch('app.api.payments.PaymentService')
    def test_missing_parameters(self, MockService, client):
        MockService.return_value.create_jazzcash_payment.side_effect = PaymentError("Missing required parameters")

        response = client.post('/api/v1/payments/jazzcash', json={})

        assert response.status_code == 400
        assert response.json()['detail'] == 'Missing required parameters'

    @patch('app.api.payments.PaymentService')
    def test_easypaisa_form(self, MockService, client):
        MockService.return_value.create_easypaisa_payment.return_value = {
            'payment_url': 'https://easypay.example/Confirm.jsf',
            'form_data': {},
            'order_number': 'TS-20250110-ABC123',
        }

        response = client.post('/api/v1/payments/easypaisa', json={'order_id': ORDER_ID, 'amount': '1500'})

        assert response.status_code == 200
        MockService.return_value.create_easypaisa_payment.assert_called_once()

    @patch('app.api.payments.PaymentService')
    def test_callback_redirects(self, MockService, client):
        MockService.return_value.handle_jazzcash_callback.return_value = (
            True, 'https://tsports.pk/payment/success?order=TS-20250110-ABC123'
        )

        response = client.post(
            '/api/v1/payments/jazzcash/callback',
            data={'pp_TxnRefNo': 'TS-20250110-ABC123', 'pp_ResponseCode': '000'},
            follow_redirects=False
        )

        assert response.status_code == 302
        assert response.headers['location'] == 'https://tsports.pk/payment/success?order=TS-20250110-ABC123'
        data = MockService.return_value.handle_jazzcash_callback.call_args[0][0]
        assert data['pp_ResponseCode'] == '000'

    @patch('app.api.payments.PaymentService')
    def test_callback_invalid_hash(self, MockService, client):
        MockService.return_value.handle_jazzcash_callback.side_effect = PaymentError("Invalid hash")

        response = client.post('/api/v1/payments/jazzcash/callback', data={'pp_SecureHash': 'x'},
                               follow_redirects=False)

        assert response.status_code == 400
        assert response.text == 'Invalid hash'

    @patch('app.api.payments.PaymentService')
    def test_callback_unexpected_error_redirects_to_failure(self, MockService, client):
        MockService.return_value.handle_jazzcash_callback.side_effect = Exception("db down")

        response = client.post('/api/v1/payments/jazzcash/callback', data={'pp_TxnRefNo': 'x'},
                               follow_redirects=False)

        assert response.status_code == 302
        assert '/payment/failed?error=Payment+processing+error' in response.headers['location']

    @patch('app.repositories.order_repository.get_db_connection_dict')
    def test_malformed_order_id_is_not_found(self, mock_get_conn, client):
        response = client.post('/api/v1/payments/jazzcash', json={'orderId': 'abc', 'amount': 10})

        assert response.status_code == 404
        assert response.json()['detail'] == 'Order not found'
        mock_get_conn.assert_not_called()
