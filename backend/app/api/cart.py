"""
Cart API Endpoints
Server copy of the signed-in user's cart

The browser keeps its own copy (ts_cart); on sign-in the storefront posts
it to /merge and continues with the merged result.
"""
from fastapi import APIRouter, HTTPException, Depends
from typing import List
from pydantic import BaseModel

from app.core.auth import TokenUser, get_current_user
from app.domain.cart import Cart, CartLine
from app.services.cart_service import CartService, CartError

router = APIRouter()


class QuantityUpdate(BaseModel):
    quantity: int


def _cart_response(cart: Cart) -> dict:
    return {
        "status": "success",
        "data": cart.to_dict()
    }


@router.get("/")
async def get_cart(user: TokenUser = Depends(get_current_user)):
    """Current server cart with catalog prices and totals"""
    try:
        return _cart_response(CartService().get_cart(user.id))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching cart: {str(e)}")


@router.put("/items")
async def add_cart_item(line: CartLine, user: TokenUser = Depends(get_current_user)):
    """Add a product/variant; an existing line gets its quantity increased"""
    try:
        return _cart_response(CartService().add_item(user.id, line))
    except CartError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error adding cart item: {str(e)}")


@router.patch("/items/{key}")
async def update_cart_item(key: str, body: QuantityUpdate, user: TokenUser = Depends(get_current_user)):
    """Set the quantity of a line; 0 or less removes it"""
    try:
        return _cart_response(CartService().set_quantity(user.id, key, body.quantity))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating cart item: {str(e)}")


@router.delete("/items/{key}")
async def remove_cart_item(key: str, user: TokenUser = Depends(get_current_user)):
    try:
        return _cart_response(CartService().remove_item(user.id, key))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error removing cart item: {str(e)}")


@router.delete("/")
async def clear_cart(user: TokenUser = Depends(get_current_user)):
    try:
        CartService().clear(user.id)
        return _cart_response(Cart())
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error clearing cart: {str(e)}")


@router.post("/merge")
async def merge_cart(lines: List[CartLine], user: TokenUser = Depends(get_current_user)):
    """
    Merge the browser cart into the server cart (last write wins per line)

    Body: the ts_cart array as stored by the storefront.
    """
    try:
        return _cart_response(CartService().merge(user.id, Cart(lines)))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error merging cart: {str(e)}")
