"""
Pytest fixtures and configuration for T-Sports Backend tests

This file provides shared fixtures that can be used across all test modules.
No test needs a database: repositories are tested against mocked psycopg2
connections, services against mocked repositories, and the API with
FastAPI's TestClient plus dependency overrides.
"""
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from app.main import app
from app.core.auth import TokenUser, get_current_user, get_current_user_optional, require_admin

PRODUCT_ID = "11111111-1111-4111-8111-111111111111"
OTHER_PRODUCT_ID = "44444444-4444-4444-8444-444444444444"
ORDER_ID = "22222222-2222-4222-8222-222222222222"
USER_ID = "33333333-3333-4333-8333-333333333333"
ADMIN_ID = "55555555-5555-4555-8555-555555555555"


def mock_connection(mock_get_conn):
    """
    Wire a patched get_db_connection_dict to a MagicMock connection

    Returns:
        (mock_conn, mock_cursor)
    """
    mock_conn = MagicMock()
    mock_cursor = MagicMock()
    mock_get_conn.return_value = mock_conn
    mock_conn.cursor.return_value = mock_cursor
    return mock_conn, mock_cursor


@pytest.fixture
def product_row():
    """
    Provides a products table row as returned by RealDictCursor
    """
    return {
        'id': PRODUCT_ID,
        'name': 'Pro Football Size 5',
        'slug': 'pro-football-size-5',
        'description': 'Match ball',
        'category': 'Football',
        'price': Decimal('2500.00'),
        'sku': 'FB-PRO-5',
        'inventory': 10,
        'images': ['https://cdn.example.com/ball.jpg'],
        'is_active': True,
        'created_at': datetime(2025, 1, 10, tzinfo=timezone.utc),
        'updated_at': None,
    }


@pytest.fixture
def order_row():
    """
    Provides an orders table row
    """
    return {
        'id': ORDER_ID,
        'order_number': 'TS-20250110-ABC123',
        'user_id': USER_ID,
        'customer_name': 'Ali Khan',
        'customer_email': 'ali@example.com',
        'customer_phone': '03001234567',
        'shipping_address': '12 Mall Road',
        'shipping_city': 'Lahore',
        'shipping_postal_code': '54000',
        'subtotal': Decimal('2500.00'),
        'shipping_fee': Decimal('0'),
        'total_amount': Decimal('2500.00'),
        'payment_method': 'jazzcash',
        'status': 'pending',
        'screenshot_url': None,
        'admin_approved': None,
        'pp_txn_ref_no': None,
        'created_at': datetime(2025, 1, 10, tzinfo=timezone.utc),
        'updated_at': None,
    }


@pytest.fixture
def item_row():
    """
    Provides an order_items table row belonging to order_row
    """
    return {
        'id': '66666666-6666-4666-8666-666666666666',
        'order_id': ORDER_ID,
        'product_id': PRODUCT_ID,
        'product_name': 'Pro Football Size 5',
        'size': None,
        'color': None,
        'quantity': 1,
        'unit_price': Decimal('2500.00'),
        'total_price': Decimal('2500.00'),
    }


@pytest.fixture
def customer():
    return TokenUser(id=USER_ID, email="ali@example.com")


@pytest.fixture
def admin_user():
    return TokenUser(id=ADMIN_ID, email="admin@example.com")


@pytest.fixture
def client():
    """
    TestClient for anonymous requests
    """
    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def customer_client(customer):
    """
    TestClient authenticated as a regular customer
    """
    app.dependency_overrides[get_current_user] = lambda: customer
    app.dependency_overrides[get_current_user_optional] = lambda: customer
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(admin_user):
    """
    TestClient authenticated as an admin
    """
    app.dependency_overrides[get_current_user] = lambda: admin_user
    app.dependency_overrides[get_current_user_optional] = lambda: admin_user
    app.dependency_overrides[require_admin] = lambda: admin_user
    yield TestClient(app)
    app.dependency_overrides.clear()
