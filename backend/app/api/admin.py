"""
Admin API - Store Management Endpoints

Everything here except /setup requires a bearer token whose user has the
admin role in user_roles.

Products:  list / create / update / delete / toggle active
Orders:    list + search, status changes, manual payment approve / reject
Analytics: dashboard counters and charts
Setup:     bootstrap of the configured admin account
"""
import logging
from uuid import UUID
from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional
from psycopg2.errors import UniqueViolation

from app.core.auth import require_admin
from app.domain.order import OrderStatusUpdate
from app.domain.product import ProductCreate, ProductUpdate
from app.repositories.analytics_repository import AnalyticsRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.services.admin_setup_service import AdminSetupService, AdminSetupError
from app.services.order_service import OrderService, OrderStateError

logger = logging.getLogger(__name__)

# ============================================================================
# ROUTERS
# ============================================================================

# Admin-only operations
router = APIRouter(dependencies=[Depends(require_admin)])

# Admin bootstrap (credentials come from server configuration)
setup_router = APIRouter()


# ============================================================================
# PRODUCTS
# ============================================================================

@router.get("/products")
async def list_products(
    search: Optional[str] = Query(None, description="Search by name, category or description"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0)
):
    """All products (active and inactive), newest first"""
    try:
        products, total = ProductRepository().find_all(
            search=search,
            is_active=None,
            sort="newest",
            limit=limit,
            offset=offset
        )

        return {
            "status": "success",
            "total": total,
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.post("/products")
async def create_product(body: ProductCreate):
    try:
        product = ProductRepository().create(body.to_row())
        logger.info(f"Product created: {product.sku} ({product.id})")

        return {
            "status": "success",
            "message": "Product created",
            "data": product.to_dict()
        }

    except UniqueViolation:
        raise HTTPException(status_code=409, detail=f"A product with slug '{body.slug}' already exists")
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating product: {str(e)}")


@router.put("/products/{product_id}")
async def update_product(product_id: UUID, body: ProductUpdate):
    data = body.to_row()
    if not data:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        product = ProductRepository().update(str(product_id), data)
        if not product:
            raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

        return {
            "status": "success",
            "message": "Product updated",
            "data": product.to_dict()
        }

    except HTTPException:
        raise
    except UniqueViolation:
        raise HTTPException(status_code=409, detail="A product with this slug already exists")
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating product: {str(e)}")


@router.delete("/products/{product_id}")
async def delete_product(product_id: UUID):
    try:
        deleted = ProductRepository().delete(str(product_id))
        if not deleted:
            raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

        logger.info(f"Product deleted: {product_id}")
        return {
            "status": "success",
            "message": "Product deleted"
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting product: {str(e)}")


@router.patch("/products/{product_id}/toggle")
async def toggle_product(product_id: UUID):
    """Activate / deactivate a product in the storefront"""
    try:
        product = ProductRepository().toggle_active(str(product_id))
        if not product:
            raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

        return {
            "status": "success",
            "message": "Product activated" if product.is_active else "Product deactivated",
            "data": product.to_dict()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error toggling product: {str(e)}")


# ============================================================================
# ORDERS
# ============================================================================

@router.get("/orders")
async def list_orders(
    search: Optional[str] = Query(None, description="Search by customer name, email or order id"),
    status: Optional[str] = Query(None, description="Filter by order status ('all' = no filter)"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0)
):
    """Orders with their items, newest first"""
    try:
        orders, total = OrderRepository().find_all(
            status=status,
            search=search,
            limit=limit,
            offset=offset
        )

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.patch("/orders/{order_id}/status")
async def update_order_status(order_id: UUID, body: OrderStatusUpdate):
    try:
        order = OrderService().update_status(str(order_id), body.status)

        return {
            "status": "success",
            "message": f"Order status updated to {order.status}",
            "data": order.to_dict()
        }

    except OrderStateError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating order status: {str(e)}")


@router.post("/orders/{order_id}/approve")
async def approve_payment(order_id: UUID):
    """Approve the uploaded payment screenshot; order becomes confirmed"""
    try:
        order = OrderService().approve(str(order_id))

        return {
            "status": "success",
            "message": "Payment approved",
            "data": order.to_dict()
        }

    except OrderStateError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error approving payment: {str(e)}")


@router.post("/orders/{order_id}/reject")
async def reject_payment(order_id: UUID):
    """Reject the payment proof; order becomes cancelled"""
    try:
        order = OrderService().reject(str(order_id))

        return {
            "status": "success",
            "message": "Payment rejected",
            "data": order.to_dict()
        }

    except OrderStateError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error rejecting payment: {str(e)}")


# ============================================================================
# ANALYTICS
# ============================================================================

@router.get("/analytics")
async def get_analytics(days: int = Query(7, ge=1, le=90)):
    """
    Dashboard data

    Returns:
    - Total sales and order count (paid orders)
    - Product and customer counts
    - Daily sales / orders for the last N days
    - Top 5 products by sales
    - Sales by category
    """
    try:
        repo = AnalyticsRepository()

        stats = repo.get_dashboard_stats()
        daily = repo.get_daily_sales(days)
        top_products = repo.get_top_products(5)
        categories = repo.get_sales_by_category()

        return {
            "status": "success",
            "data": {
                "total_sales": float(stats['total_sales']),
                "total_orders": stats['total_orders'],
                "total_products": stats['total_products'],
                "total_customers": stats['total_customers'],
                "daily_sales": [
                    {
                        "date": row['day'].isoformat(),
                        "day": row['day'].strftime("%a"),
                        "sales": float(row['sales']),
                        "orders": row['orders'],
                    }
                    for row in daily
                ],
                "top_products": [
                    {
                        "name": row['name'],
                        "quantity": int(row['quantity']),
                        "sales": float(row['sales']),
                    }
                    for row in top_products
                ],
                "sales_by_category": [
                    {"category": row['category'], "sales": float(row['sales'])}
                    for row in categories
                ],
            }
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching analytics: {str(e)}")


# ============================================================================
# SETUP
# ============================================================================

@setup_router.post("/setup")
async def setup_admin():
    """
    Create (or verify) the admin account from ADMIN_EMAIL / ADMIN_PASSWORD

    Safe to call repeatedly: an existing user only gets its profile and
    roles re-checked.
    """
    try:
        result = AdminSetupService().ensure_admin()

        return {
            "status": "success",
            "message": result['message'],
            "data": {
                "created": result['created'],
                "user_id": result['user_id'],
                "email": result['email'],
            }
        }

    except AdminSetupError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Admin setup failed: {e}")
        raise HTTPException(status_code=500, detail=f"Error setting up admin: {str(e)}")
