"""
Order Service
Customer order views and admin status transitions

Manual payments (bank transfer, wallet transfer outside the gateway) go
through a screenshot review:

    pending --upload--> awaiting_approval --approve--> confirmed
                                          --reject---> cancelled
"""
import logging
from decimal import Decimal
from typing import Optional, Dict

from app.domain.order import Order, OrderStatus
from app.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class OrderStateError(Exception):
    """Requested transition is not allowed from the order's current state"""

    def __init__(self, message: str, status_code: int = 409):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class OrderService:

    def __init__(self, order_repo: Optional[OrderRepository] = None):
        self.order_repo = order_repo or OrderRepository()

    def get_order(self, order_id: str) -> Order:
        order = self.order_repo.find_by_id(order_id)
        if order is None:
            raise OrderStateError("Order not found", status_code=404)
        return order

    def get_customer_orders(self, user_id: str) -> Dict:
        """
        Orders of a user for the dashboard

        total_spent only counts paid orders.
        """
        orders = self.order_repo.find_by_user(user_id)
        total_spent = sum(
            (order.total_amount for order in orders if order.is_paid),
            Decimal("0")
        )
        return {
            'orders': orders,
            'total_orders': len(orders),
            'total_spent': total_spent,
        }

    def update_status(self, order_id: str, status: str) -> Order:
        """Admin status change; the status must be a known one"""
        if status not in OrderStatus.ALL:
            raise OrderStateError(f"Unknown order status '{status}'", status_code=400)

        order = self.order_repo.update(order_id, {'status': status})
        if order is None:
            raise OrderStateError("Order not found", status_code=404)

        logger.info(f"Order {order.order_number} status -> {status}")
        return order

    def approve(self, order_id: str) -> Order:
        """
        Approve a manual payment

        Requires an uploaded screenshot and status awaiting_approval.
        """
        order = self.get_order(order_id)

        if not order.screenshot_url:
            raise OrderStateError("No payment screenshot uploaded for this order")
        if order.status != OrderStatus.AWAITING_APPROVAL:
            raise OrderStateError(
                f"Only orders awaiting approval can be approved (current: {order.status})"
            )

        updated = self.order_repo.update(order.id, {
            'admin_approved': True,
            'status': OrderStatus.CONFIRMED,
        })
        logger.info(f"Payment for order {order.order_number} approved")
        return updated

    def reject(self, order_id: str) -> Order:
        """Reject a manual payment; only orders awaiting approval"""
        order = self.get_order(order_id)

        if order.status != OrderStatus.AWAITING_APPROVAL:
            raise OrderStateError(
                f"Only orders awaiting approval can be rejected (current: {order.status})"
            )

        updated = self.order_repo.update(order.id, {
            'admin_approved': False,
            'status': OrderStatus.CANCELLED,
        })
        logger.info(f"Payment for order {order.order_number} rejected")
        return updated
