"""
Orders API Endpoints (customer side)

- GET  /api/v1/me/orders                  - Order history of the signed-in user
- GET  /api/v1/orders/{order_id}          - Order status page
- POST /api/v1/orders/{order_id}/screenshot - Manual payment proof upload
"""
from uuid import UUID
from fastapi import APIRouter, HTTPException, Depends, UploadFile, File
from typing import Optional

from app.core.auth import TokenUser, get_current_user, get_current_user_optional, is_admin
from app.domain.order import Order
from app.services.order_service import OrderService, OrderStateError
from app.services.screenshot_service import ScreenshotService, ScreenshotError

router = APIRouter()


def ensure_order_access(order: Order, user: Optional[TokenUser]) -> None:
    """
    Guest orders are reachable by id; account orders only by their owner
    or an admin
    """
    if order.user_id is None:
        return
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    if user.id != order.user_id and not is_admin(user):
        raise HTTPException(status_code=403, detail="Access denied")


def order_status_view(order: Order) -> dict:
    """Fields shown on the order status page"""
    return {
        "id": order.id,
        "order_number": order.order_number,
        "status": order.status,
        "customer_name": order.customer_name,
        "payment_method": order.payment_method,
        "subtotal": float(order.subtotal),
        "shipping_fee": float(order.shipping_fee),
        "total_amount": float(order.total_amount),
        "screenshot_url": order.screenshot_url,
        "admin_approved": order.admin_approved,
        "created_at": order.created_at,
        "items": [item.to_dict() for item in order.items],
    }


@router.get("/me/orders")
async def get_my_orders(user: TokenUser = Depends(get_current_user)):
    """
    Orders of the signed-in user, newest first

    total_spent sums paid orders only.
    """
    try:
        summary = OrderService().get_customer_orders(user.id)

        return {
            "status": "success",
            "total_orders": summary['total_orders'],
            "total_spent": float(summary['total_spent']),
            "data": [order.to_dict() for order in summary['orders']]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/orders/{order_id}")
async def get_order(
    order_id: UUID,
    user: Optional[TokenUser] = Depends(get_current_user_optional)
):
    try:
        order = OrderService().get_order(str(order_id))
        ensure_order_access(order, user)

        return {
            "status": "success",
            "data": order_status_view(order)
        }

    except HTTPException:
        raise
    except OrderStateError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")


@router.post("/orders/{order_id}/screenshot")
async def upload_payment_screenshot(
    order_id: UUID,
    file: UploadFile = File(..., description="Payment screenshot (image, max 5MB)"),
    user: Optional[TokenUser] = Depends(get_current_user_optional)
):
    """
    Upload the payment proof of a manual payment

    The order moves to awaiting_approval until an admin reviews it.
    """
    try:
        order = OrderService().get_order(str(order_id))
        ensure_order_access(order, user)

        # Reject by the parsed part size before reading it into memory
        if file.size is not None:
            ScreenshotService.validate(file.content_type, file.size)

        data = await file.read()
        updated = ScreenshotService().upload(order, file.filename, file.content_type, data)

        return {
            "status": "success",
            "message": "Screenshot uploaded. Waiting for admin approval",
            "data": order_status_view(updated)
        }

    except HTTPException:
        raise
    except (OrderStateError, ScreenshotError) as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error uploading screenshot: {str(e)}")
