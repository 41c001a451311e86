"""
Payment Service
JazzCash and EasyPaisa hosted-checkout payloads and the JazzCash callback

The storefront posts ``form_data`` to ``payment_url`` from the browser; the
gateway then posts the result back to the callback endpoint, which updates
the payment and order and redirects the customer.
"""
import hashlib
import hmac
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional, Tuple
from urllib.parse import urlencode

from app.core.config import settings
from app.domain.order import Order, OrderStatus, PaymentStatus, PaymentMethod
from app.repositories.order_repository import OrderRepository
from app.repositories.payment_repository import PaymentRepository

logger = logging.getLogger(__name__)

JAZZCASH_SUCCESS_CODE = "000"
JAZZCASH_EXPIRY = timedelta(minutes=30)
EASYPAISA_EXPIRY = timedelta(hours=24)
HASH_FIELD = "pp_SecureHash"


class PaymentError(Exception):
    """Payment request rejected"""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def gateway_timestamp(dt: datetime) -> str:
    """YYYYMMDDHHMMSS"""
    return dt.strftime("%Y%m%d%H%M%S")


def to_paisa(amount: Decimal) -> str:
    """Gateways expect the amount in paisa (1 PKR = 100 paisa)"""
    return str(int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)))


def sign_payload(payload: Dict[str, str], salt: str) -> str:
    """
    HMAC-SHA256 secure hash

    Message is the salt followed by the non-empty values sorted by field
    name, joined with '&'; the salt is also the key.
    """
    values = [
        str(payload[key]) for key in sorted(payload)
        if key != HASH_FIELD and payload[key] not in (None, "")
    ]
    message = "&".join([salt] + values)
    return hmac.new(salt.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest().upper()


class PaymentService:
    """
    Service for gateway payments

    Handles:
    - JazzCash payload (payment marked initiated)
    - JazzCash callback (payment completed/failed, order paid/cancelled)
    - EasyPaisa payload (new initiated payment row)
    """

    def __init__(self, order_repo: Optional[OrderRepository] = None,
                 payment_repo: Optional[PaymentRepository] = None):
        self.order_repo = order_repo or OrderRepository()
        self.payment_repo = payment_repo or PaymentRepository()

    def _get_order(self, order_id: Optional[str], amount: Optional[Decimal]) -> Order:
        if not order_id or not amount:
            raise PaymentError("Missing required parameters: order_id and amount")

        order = self.order_repo.find_by_id(order_id)
        if order is None:
            raise PaymentError("Order not found", status_code=404)

        # The gateway charges what is signed here; it must be the checkout total
        if Decimal(amount) != order.total_amount:
            logger.warning(
                f"Payment amount {amount} does not match total {order.total_amount} "
                f"of order {order.order_number}"
            )
            raise PaymentError("Amount does not match the order total")
        return order

    # =========================================================================
    # JazzCash
    # =========================================================================

    def create_jazzcash_payment(self, order_id: Optional[str], amount: Optional[Decimal],
                                currency: str = "PKR", now: Optional[datetime] = None) -> Dict:
        """
        Build the signed JazzCash form for an order

        Returns:
            {payment_url, form_data, order_number}
        """
        order = self._get_order(order_id, amount)
        now = now or datetime.now(timezone.utc)

        form_data = {
            'pp_Version': '1.1',
            'pp_TxnType': 'MWALLET',
            'pp_Language': 'EN',
            'pp_MerchantID': settings.JAZZCASH_MERCHANT_ID,
            'pp_SubMerchantID': '',
            'pp_Password': settings.JAZZCASH_PASSWORD,
            'pp_BankID': 'TBANK',
            'pp_ProductID': 'RETL',
            'pp_TxnRefNo': order.order_number,
            'pp_Amount': to_paisa(amount),
            'pp_TxnCurrency': currency,
            'pp_TxnDateTime': gateway_timestamp(now),
            'pp_BillReference': order.order_number,
            'pp_Description': f"Payment for Order {order.order_number}",
            'pp_TxnExpiryDateTime': gateway_timestamp(now + JAZZCASH_EXPIRY),
            'pp_ReturnURL': f"{settings.SITE_URL}/payment/success",
            'pp_CancelURL': f"{settings.SITE_URL}/payment/cancel",
        }
        form_data[HASH_FIELD] = sign_payload(form_data, settings.JAZZCASH_INTEGRITY_SALT)

        payment_update = {
            'transaction_id': order.order_number,
            'response_data': form_data,
            'status': PaymentStatus.INITIATED,
        }
        updated = self.payment_repo.update_for_order(order.id, payment_update)
        if updated == 0:
            # No payment row yet for this order
            self.payment_repo.create({
                'order_id': order.id,
                'provider': PaymentMethod.JAZZCASH,
                'amount': amount,
                'currency': currency,
                **payment_update,
            })

        logger.info(f"JazzCash payment initiated for order {order.order_number}")

        return {
            'payment_url': settings.JAZZCASH_PAYMENT_URL,
            'form_data': form_data,
            'order_number': order.order_number,
        }

    def verify_callback_hash(self, data: Dict[str, str]) -> bool:
        """
        Check pp_SecureHash of a gateway post

        Without a configured integrity salt there is nothing to verify
        against and every post is accepted.
        """
        salt = settings.JAZZCASH_INTEGRITY_SALT
        if not salt:
            return True
        received = (data.get(HASH_FIELD) or "").upper()
        return hmac.compare_digest(received, sign_payload(data, salt))

    def handle_jazzcash_callback(self, data: Dict[str, str]) -> Tuple[bool, str]:
        """
        Apply a JazzCash result to the payment and order

        Returns:
            (success, redirect URL for the customer)

        Raises:
            PaymentError: bad hash (400) or unknown order (404)
        """
        reference = data.get('pp_TxnRefNo')
        response_code = data.get('pp_ResponseCode')
        retrieval_ref = data.get('pp_RetreivalReferenceNo')

        if not self.verify_callback_hash(data):
            logger.warning(f"JazzCash callback with invalid secure hash for {reference}")
            raise PaymentError("Invalid secure hash")

        order = self.order_repo.find_by_order_number(reference) if reference else None
        if order is None:
            logger.error(f"Order not found: {reference}")
            raise PaymentError("Order not found", status_code=404)

        success = response_code == JAZZCASH_SUCCESS_CODE

        self.payment_repo.update_for_order(order.id, {
            'status': PaymentStatus.COMPLETED if success else PaymentStatus.FAILED,
            'transaction_id': retrieval_ref or reference,
            'response_data': {
                **data,
                'processed_at': datetime.now(timezone.utc).isoformat(),
            },
        })
        self.order_repo.update(order.id, {
            'status': OrderStatus.PAID if success else OrderStatus.CANCELLED,
            'pp_txn_ref_no': retrieval_ref,
        })

        if success:
            logger.info(f"Order {reference} paid successfully")
            return True, f"{settings.SITE_URL}/payment/success?{urlencode({'order': reference})}"

        message = data.get('pp_ResponseMessage') or 'Payment failed'
        logger.info(f"Order {reference} payment failed ({response_code}): {message}")
        return False, f"{settings.SITE_URL}/payment/failed?{urlencode({'order': reference, 'error': message})}"

    # =========================================================================
    # EasyPaisa
    # =========================================================================

    def create_easypaisa_payment(self, order_id: Optional[str], amount: Optional[Decimal],
                                 now: Optional[datetime] = None) -> Dict:
        """
        Build the EasyPaisa form for an order and record an initiated payment

        Returns:
            {payment_url, form_data, order_number}
        """
        order = self._get_order(order_id, amount)
        now = now or datetime.now(timezone.utc)

        postback_url = (
            settings.EASYPAISA_POSTBACK_URL
            or f"{settings.SUPABASE_URL}/functions/v1/easypaisa-callback"
        )

        form_data = {
            'pp_Version': '1.1',
            'pp_TxnType': 'MWALLET',
            'pp_Language': 'EN',
            'pp_MerchantID': settings.EASYPAISA_STORE_ID,
            'pp_SubMerchantID': '',
            'pp_Password': settings.EASYPAISA_INTEGRATION_KEY,
            'pp_BankID': 'TBANK',
            'pp_ProductID': 'RETL',
            'pp_TxnRefNo': order.order_number,
            'pp_Amount': to_paisa(amount),
            'pp_TxnCurrency': 'PKR',
            'pp_TxnDateTime': gateway_timestamp(now),
            'pp_BillReference': order.order_number,
            'pp_Description': f"Payment for Order {order.order_number}",
            'pp_TxnExpiryDateTime': gateway_timestamp(now + EASYPAISA_EXPIRY),
            'pp_ReturnURL': f"{settings.SITE_URL}/payment/success",
            'pp_PostBackURL': postback_url,
        }
        form_data[HASH_FIELD] = sign_payload(form_data, settings.EASYPAISA_INTEGRATION_KEY)

        self.payment_repo.create({
            'order_id': order.id,
            'provider': PaymentMethod.EASYPAISA,
            'amount': amount,
            'currency': 'PKR',
            'status': PaymentStatus.INITIATED,
            'transaction_id': order.order_number,
            'response_data': form_data,
        })

        logger.info(f"EasyPaisa payment initiated for order {order.order_number}")

        return {
            'payment_url': settings.EASYPAISA_PAYMENT_URL,
            'form_data': form_data,
            'order_number': order.order_number,
        }
