"""
Checkout API Endpoint
Places an order for a guest or a signed-in customer
"""
import logging
from fastapi import APIRouter, HTTPException, Depends
from typing import Optional

from app.core.auth import TokenUser, get_current_user_optional
from app.domain.order import CheckoutRequest
from app.services.checkout_service import CheckoutService, CheckoutError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/")
async def checkout(
    request: CheckoutRequest,
    user: Optional[TokenUser] = Depends(get_current_user_optional)
):
    """
    Create an order from the checkout form

    Prices, shipping and totals are computed server side. The response
    carries the order id and number used by the payment step.
    """
    try:
        order = CheckoutService().place_order(request, user_id=user.id if user else None)

        return {
            "status": "success",
            "message": f"Order {order.order_number} placed",
            "data": order.to_dict()
        }

    except CheckoutError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Checkout failed: {e}")
        raise HTTPException(status_code=500, detail=f"Error placing order: {str(e)}")
