"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from app.repositories.product_repository import ProductRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.payment_repository import PaymentRepository
from app.repositories.profile_repository import ProfileRepository
from app.repositories.cart_repository import CartRepository
from app.repositories.contact_repository import ContactRepository
from app.repositories.analytics_repository import AnalyticsRepository

__all__ = [
    'ProductRepository',
    'OrderRepository',
    'PaymentRepository',
    'ProfileRepository',
    'CartRepository',
    'ContactRepository',
    'AnalyticsRepository',
]
