"""
Checkout Service
Turns the checkout form into an order

Flow:
1. Validate terms and payment method
2. Reprice every line from the catalog (client prices are never trusted)
3. Check stock per product
4. Compute shipping and totals
5. Insert order + items + pending payment in one transaction
6. Clear the server cart of a signed-in user
"""
import logging
import secrets
from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Dict, List

from app.core.config import settings
from app.domain.customer import ProfileUpdate
from app.domain.order import Order, OrderStatus, PaymentStatus, PaymentMethod, CheckoutRequest
from app.repositories.cart_repository import CartRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)


class CheckoutError(Exception):
    """Checkout rejected; message is safe to show to the customer"""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def calculate_shipping(subtotal: Decimal) -> Decimal:
    """Free shipping strictly above the threshold, flat fee otherwise"""
    if subtotal > settings.FREE_SHIPPING_THRESHOLD:
        return Decimal("0")
    return settings.SHIPPING_FEE


def generate_order_number(now: Optional[datetime] = None) -> str:
    """
    Public order number, also used as the gateway transaction reference

    Format: TS-YYYYMMDD-XXXXXX (hex suffix)
    """
    now = now or datetime.now(timezone.utc)
    return f"TS-{now.strftime('%Y%m%d')}-{secrets.token_hex(3).upper()}"


class CheckoutService:
    """Service for placing orders"""

    def __init__(self,
                 product_repo: Optional[ProductRepository] = None,
                 order_repo: Optional[OrderRepository] = None,
                 cart_repo: Optional[CartRepository] = None,
                 profile_repo: Optional[ProfileRepository] = None):
        self.product_repo = product_repo or ProductRepository()
        self.order_repo = order_repo or OrderRepository()
        self.cart_repo = cart_repo or CartRepository()
        self.profile_repo = profile_repo or ProfileRepository()

    def _validate_payment_method(self, method: str) -> None:
        if method == PaymentMethod.COD:
            raise CheckoutError("Cash on delivery is not available yet")
        if method not in PaymentMethod.AVAILABLE:
            raise CheckoutError(
                f"Unknown payment method '{method}'. Valid: {', '.join(PaymentMethod.AVAILABLE)}"
            )

    def build_items(self, request: CheckoutRequest) -> List[Dict]:
        """
        Order item rows priced from the catalog

        Raises:
            CheckoutError: unknown/inactive product or not enough stock
        """
        product_ids = list({item.product_id for item in request.items})
        products = {p.id: p for p in self.product_repo.find_by_ids(product_ids)}

        requested: Dict[str, int] = defaultdict(int)
        rows = []
        for item in request.items:
            product = products.get(item.product_id)
            if product is None or not product.is_active:
                raise CheckoutError(f"Product {item.product_id} is not available")

            requested[product.id] += item.quantity
            rows.append({
                'product_id': product.id,
                'product_name': product.name,
                'size': item.size,
                'color': item.color,
                'quantity': item.quantity,
                'unit_price': product.price,
                'total_price': product.price * item.quantity,
            })

        # Variants of one product share its inventory
        for product_id, quantity in requested.items():
            product = products[product_id]
            if quantity > product.inventory:
                raise CheckoutError(
                    f"Only {product.inventory} unit(s) of {product.name} in stock",
                    status_code=409
                )

        return rows

    def place_order(self, request: CheckoutRequest, user_id: Optional[str] = None) -> Order:
        """
        Create the order for a checkout form

        Args:
            request: Validated checkout form
            user_id: Signed-in user, None for guest checkout

        Returns:
            Created order (status pending) with items
        """
        if not request.agree_terms:
            raise CheckoutError("You must agree to the terms and conditions")
        self._validate_payment_method(request.payment_method)

        items = self.build_items(request)
        subtotal = sum((row['total_price'] for row in items), Decimal("0"))
        shipping_fee = calculate_shipping(subtotal)
        total = subtotal + shipping_fee

        order_data = {
            'order_number': generate_order_number(),
            'user_id': user_id,
            'customer_name': request.customer_name,
            'customer_email': request.email,
            'customer_phone': request.phone,
            'shipping_address': request.address,
            'shipping_city': request.city,
            'shipping_postal_code': request.postal_code,
            'subtotal': subtotal,
            'shipping_fee': shipping_fee,
            'total_amount': total,
            'payment_method': request.payment_method,
            'status': OrderStatus.PENDING,
        }
        payment_data = {
            'provider': request.payment_method,
            'amount': total,
            'currency': settings.CURRENCY,
            'status': PaymentStatus.PENDING,
        }

        order = self.order_repo.create(order_data, items, payment_data)
        logger.info(
            f"Order {order.order_number} placed: {order.item_count} unit(s), "
            f"total {settings.CURRENCY} {total}, method {request.payment_method}"
        )

        if user_id:
            self._after_signed_in_checkout(user_id, request)

        return order

    def _after_signed_in_checkout(self, user_id: str, request: CheckoutRequest) -> None:
        # The order is committed at this point; cleanup failures must not hide it
        try:
            self.cart_repo.clear(user_id)
            if request.save_info:
                self.profile_repo.upsert(user_id, ProfileUpdate(
                    full_name=request.customer_name,
                    phone=request.phone,
                    address=request.address,
                    city=request.city,
                ))
        except Exception as e:
            logger.error(f"Post-checkout cleanup failed for user {user_id}: {e}")
