"""
API tests for the admin panel endpoints
"""
from unittest.mock import patch
from datetime import date
from decimal import Decimal
from psycopg2.errors import UniqueViolation

from app.domain.order import Order
from app.domain.product import Product
from app.services.admin_setup_service import AdminSetupError
from app.services.order_service import OrderStateError
from conftest import PRODUCT_ID, ORDER_ID

NEW_PRODUCT = {
    'name': 'Cricket Bat English Willow',
    'slug': 'cricket-bat-english-willow',
    'category': 'Cricket',
    'price': 12000,
    'sku': 'CB-EW-01',
    'inventory': 5,
    'images': ['https://cdn.example.com/bat.jpg'],
}


class TestAdminAccess:

    def test_requires_authentication(self, client):
        assert client.get('/api/v1/admin/products').status_code == 401

    @patch('app.core.auth.ProfileRepository')
    def test_customers_are_forbidden(self, MockProfiles, customer_client):
        MockProfiles.return_value.has_role.return_value = False

        response = customer_client.get('/api/v1/admin/orders')

        assert response.status_code == 403
        assert response.json()['detail'] == 'Access denied. Admin role required'


class TestAdminProducts:

    @patch('app.api.admin.ProductRepository')
    def test_list_includes_inactive(self, MockRepo, admin_client, product_row):
        MockRepo.return_value.find_all.return_value = ([Product(**product_row)], 1)

        response = admin_client.get('/api/v1/admin/products?search=ball')

        assert response.status_code == 200
        kwargs = MockRepo.return_value.find_all.call_args.kwargs
        assert kwargs['is_active'] is None
        assert kwargs['search'] == 'ball'

    @patch('app.api.admin.ProductRepository')
    def test_create(self, MockRepo, admin_client, product_row):
        MockRepo.return_value.create.return_value = Product(**product_row)

        response = admin_client.post('/api/v1/admin/products', json=NEW_PRODUCT)

        assert response.status_code == 200
        row = MockRepo.return_value.create.call_args[0][0]
        assert row['images'] == ['https://cdn.example.com/bat.jpg']
        assert row['price'] == Decimal('12000')

    def test_create_rejects_bad_slug(self, admin_client):
        response = admin_client.post('/api/v1/admin/products', json={**NEW_PRODUCT, 'slug': 'Cricket Bat'})

        assert response.status_code == 422

    @patch('app.api.admin.ProductRepository')
    def test_create_duplicate_slug(self, MockRepo, admin_client):
        MockRepo.return_value.create.side_effect = UniqueViolation()

        response = admin_client.post('/api/v1/admin/products', json=NEW_PRODUCT)

        assert response.status_code == 409

    @patch('app.api.admin.ProductRepository')
    def test_update(self, MockRepo, admin_client, product_row):
        MockRepo.return_value.update.return_value = Product(**{**product_row, 'price': Decimal('2200')})

        response = admin_client.put(f'/api/v1/admin/products/{PRODUCT_ID}', json={'price': 2200})

        assert response.status_code == 200
        MockRepo.return_value.update.assert_called_once_with(PRODUCT_ID, {'price': Decimal('2200')})

    def test_update_without_fields(self, admin_client):
        assert admin_client.put(f'/api/v1/admin/products/{PRODUCT_ID}', json={}).status_code == 400

    @patch('app.api.admin.ProductRepository')
    def test_delete_missing(self, MockRepo, admin_client):
        MockRepo.return_value.delete.return_value = False

        assert admin_client.delete(f'/api/v1/admin/products/{PRODUCT_ID}').status_code == 404

    @patch('app.api.admin.ProductRepository')
    def test_toggle(self, MockRepo, admin_client, product_row):
        MockRepo.return_value.toggle_active.return_value = Product(**{**product_row, 'is_active': False})

        response = admin_client.patch(f'/api/v1/admin/products/{PRODUCT_ID}/toggle')

        assert response.status_code == 200
        assert response.json()['message'] == 'Product deactivated'


class TestAdminOrders:

    @patch('app.api.admin.OrderRepository')
    def test_list_with_filters(self, MockRepo, admin_client, order_row):
        MockRepo.return_value.find_all.return_value = ([Order(**order_row)], 1)

        response = admin_client.get('/api/v1/admin/orders?status=pending&search=ali')

        assert response.status_code == 200
        assert response.json()['total'] == 1
        kwargs = MockRepo.return_value.find_all.call_args.kwargs
        assert kwargs['status'] == 'pending'
        assert kwargs['search'] == 'ali'

    @patch('app.api.admin.OrderService')
    def test_update_status(self, MockService, admin_client, order_row):
        MockService.return_value.update_status.return_value = Order(**{**order_row, 'status': 'shipped'})

        response = admin_client.patch(f'/api/v1/admin/orders/{ORDER_ID}/status', json={'status': 'shipped'})

        assert response.status_code == 200
        MockService.return_value.update_status.assert_called_once_with(ORDER_ID, 'shipped')

    def test_update_status_unknown_value(self, admin_client):
        response = admin_client.patch(f'/api/v1/admin/orders/{ORDER_ID}/status', json={'status': 'lost'})

        assert response.status_code == 422

    @patch('app.api.admin.OrderService')
    def test_approve_conflict(self, MockService, admin_client):
        MockService.return_value.approve.side_effect = OrderStateError("No payment screenshot uploaded for this order")

        response = admin_client.post(f'/api/v1/admin/orders/{ORDER_ID}/approve')

        assert response.status_code == 409

    @patch('app.api.admin.OrderService')
    def test_reject(self, MockService, admin_client, order_row):
        MockService.return_value.reject.return_value = Order(**{**order_row, 'status': 'cancelled'})

        response = admin_client.post(f'/api/v1/admin/orders/{ORDER_ID}/reject')

        assert response.status_code == 200
        assert response.json()['data']['status'] == 'cancelled'


class TestAdminAnalytics:

    @patch('app.api.admin.AnalyticsRepository')
    def test_dashboard(self, MockRepo, admin_client):
        repo = MockRepo.return_value
        repo.get_dashboard_stats.return_value = {
            'total_sales': Decimal('7500'), 'total_orders': 3,
            'total_products': 12, 'total_customers': 4,
        }
        repo.get_daily_sales.return_value = [
            {'day': date(2025, 1, 6), 'sales': Decimal('2500'), 'orders': 1},
        ]
        repo.get_top_products.return_value = [
            {'name': 'Pro Football Size 5', 'quantity': 3, 'sales': Decimal('7500')},
        ]
        repo.get_sales_by_category.return_value = [{'category': 'Football', 'sales': Decimal('7500')}]

        response = admin_client.get('/api/v1/admin/analytics?days=14')

        assert response.status_code == 200
        data = response.json()['data']
        assert data['total_sales'] == 7500.0
        assert data['daily_sales'] == [{'date': '2025-01-06', 'day': 'Mon', 'sales': 2500.0, 'orders': 1}]
        assert data['top_products'][0]['quantity'] == 3
        repo.get_daily_sales.assert_called_once_with(14)


class TestAdminSetup:

    @patch('app.api.admin.AdminSetupService')
    def test_setup_is_public(self, MockService, client):
        MockService.return_value.ensure_admin.return_value = {
            'created': False, 'user_id': 'u-9', 'email': 'admin@tsports.pk',
            'message': 'Admin user already exists and role verified',
        }

        response = client.post('/api/v1/admin/setup')

        assert response.status_code == 200
        assert response.json()['data']['created'] is False

    @patch('app.api.admin.AdminSetupService')
    def test_setup_not_configured(self, MockService, client):
        MockService.return_value.ensure_admin.side_effect = AdminSetupError("ADMIN_EMAIL / ADMIN_PASSWORD not configured")

        assert client.post('/api/v1/admin/setup').status_code == 400
