"""
Table declarations (SQLAlchemy) for the storefront schema
"""
from .product import Product
from .order import Order, OrderItem, Payment
from .customer import Profile, UserRole, CartItem, ContactMessage

__all__ = [
    "Product",
    "Order",
    "OrderItem",
    "Payment",
    "Profile",
    "UserRole",
    "CartItem",
    "ContactMessage",
]
