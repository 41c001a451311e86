"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.
"""
from app.domain.product import Product, ProductCreate, ProductUpdate
from app.domain.order import Order, OrderItem, Payment, OrderStatus, PaymentStatus, PaymentMethod
from app.domain.cart import Cart, CartLine, item_key
from app.domain.customer import Profile, ProfileUpdate, ContactMessageCreate, Role

__all__ = [
    'Product', 'ProductCreate', 'ProductUpdate',
    'Order', 'OrderItem', 'Payment', 'OrderStatus', 'PaymentStatus', 'PaymentMethod',
    'Cart', 'CartLine', 'item_key',
    'Profile', 'ProfileUpdate', 'ContactMessageCreate', 'Role',
]
