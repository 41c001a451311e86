"""
Unit tests for ProductRepository

These tests validate repository logic without requiring a database connection.
"""
import pytest
from unittest.mock import patch
from decimal import Decimal

from app.repositories.product_repository import ProductRepository
from app.domain.product import Product
from conftest import mock_connection, PRODUCT_ID


class TestProductRepository:
    """Test ProductRepository methods"""

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_find_by_id_returns_product(self, mock_get_conn, product_row):
        """Test find_by_id returns a Product domain model"""
        # Arrange: Mock database connection
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = product_row

        # Act: Call repository method
        repo = ProductRepository()
        product = repo.find_by_id(PRODUCT_ID)

        # Assert: Verify result
        assert isinstance(product, Product)
        assert product.id == PRODUCT_ID
        assert product.slug == 'pro-football-size-5'
        assert product.primary_image == 'https://cdn.example.com/ball.jpg'
        assert product.is_in_stock is True

        # Verify database was called correctly
        mock_cursor.execute.assert_called_once()
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_find_by_id_returns_none_when_not_found(self, mock_get_conn):
        """Test find_by_id returns None when product doesn't exist"""
        # Arrange
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        # Act
        product = ProductRepository().find_by_id(PRODUCT_ID)

        # Assert
        assert product is None
        mock_conn.close.assert_called_once()

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_find_by_id_malformed_id_skips_query(self, mock_get_conn):
        assert ProductRepository().find_by_id('not-a-uuid') is None
        mock_get_conn.assert_not_called()

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_null_images_become_empty_list(self, mock_get_conn, product_row):
        _, mock_cursor = mock_connection(mock_get_conn)
        product_row['images'] = None
        mock_cursor.fetchone.return_value = product_row

        product = ProductRepository().find_by_id_or_slug('pro-football-size-5')

        assert product.images == []
        assert product.primary_image is None

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_find_by_id_or_slug_matches_either(self, mock_get_conn, product_row):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = product_row

        ProductRepository().find_by_id_or_slug('pro-football-size-5')

        sql, params = mock_cursor.execute.call_args[0]
        assert "id::text = %s OR slug = %s" in sql
        assert params == ('pro-football-size-5', 'pro-football-size-5')

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_find_by_ids_empty_skips_query(self, mock_get_conn):
        assert ProductRepository().find_by_ids([]) == []
        mock_get_conn.assert_not_called()

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_find_all_returns_products_and_count(self, mock_get_conn, product_row):
        """Test find_all returns list of products and total count"""
        # Arrange
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 1}
        mock_cursor.fetchall.return_value = [product_row]

        # Act
        products, total = ProductRepository().find_all()

        # Assert
        assert total == 1
        assert len(products) == 1
        assert products[0].price == Decimal('2500.00')

        # Active products only, newest first
        count_sql, count_params = mock_cursor.execute.call_args_list[0][0]
        assert "is_active = %s" in count_sql
        assert count_params == [True]
        select_sql = mock_cursor.execute.call_args_list[1][0][0]
        assert "ORDER BY created_at DESC" in select_sql

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_find_all_with_filters(self, mock_get_conn):
        """Test that category, search and price range build the WHERE clause"""
        # Arrange
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 0}
        mock_cursor.fetchall.return_value = []

        # Act
        ProductRepository().find_all(
            category='cricket',
            search='bat',
            price_range='2000-5000',
            sort='price-low',
            limit=20,
            offset=40
        )

        # Assert
        select_sql, params = mock_cursor.execute.call_args_list[1][0]
        assert "category ILIKE %s" in select_sql
        assert "name ILIKE %s OR category ILIKE %s OR description ILIKE %s" in select_sql
        assert "price BETWEEN %s AND %s" in select_sql
        assert "ORDER BY price ASC" in select_sql
        assert params == [True, '%cricket%', '%bat%', '%bat%', '%bat%',
                          Decimal('2000'), Decimal('5000'), 20, 40]

    @pytest.mark.parametrize("price_range,expected_sql,expected_param", [
        ('under-2000', 'price < %s', Decimal('2000')),
        ('above-5000', 'price > %s', Decimal('5000')),
    ])
    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_open_price_ranges(self, mock_get_conn, price_range, expected_sql, expected_param):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 0}
        mock_cursor.fetchall.return_value = []

        ProductRepository().find_all(price_range=price_range)

        count_sql, params = mock_cursor.execute.call_args_list[0][0]
        assert expected_sql in count_sql
        assert params == [True, expected_param]

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_find_all_admin_view_includes_inactive(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 0}
        mock_cursor.fetchall.return_value = []

        ProductRepository().find_all(is_active=None)

        count_sql, params = mock_cursor.execute.call_args_list[0][0]
        assert "is_active" not in count_sql
        assert "1=1" in count_sql
        assert params == []

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_category_all_is_no_filter(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {'total': 0}
        mock_cursor.fetchall.return_value = []

        ProductRepository().find_all(category='All')

        count_sql = mock_cursor.execute.call_args_list[0][0][0]
        assert "category ILIKE" not in count_sql

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_create_commits(self, mock_get_conn, product_row):
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = product_row

        product = ProductRepository().create({'name': 'Pro Football Size 5', 'slug': 'pro-football-size-5'})

        assert product.id == PRODUCT_ID
        mock_conn.commit.assert_called_once()
        mock_conn.rollback.assert_not_called()

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_create_rolls_back_on_error(self, mock_get_conn):
        mock_conn, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = Exception("duplicate key value violates unique constraint")

        with pytest.raises(Exception):
            ProductRepository().create({'name': 'x'})

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_update_returns_none_when_missing(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        assert ProductRepository().update(PRODUCT_ID, {'price': Decimal('10')}) is None

        sql, values = mock_cursor.execute.call_args[0]
        assert "price = %s" in sql
        assert "updated_at = NOW()" in sql
        assert values == [Decimal('10'), PRODUCT_ID]

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_delete(self, mock_get_conn):
        _, mock_cursor = mock_connection(mock_get_conn)
        mock_cursor.fetchone.side_effect = [{'id': PRODUCT_ID}, None]

        repo = ProductRepository()
        assert repo.delete(PRODUCT_ID) is True
        assert repo.delete(PRODUCT_ID) is False

    @patch('app.repositories.product_repository.get_db_connection_dict')
    def test_toggle_active(self, mock_get_conn, product_row):
        _, mock_cursor = mock_connection(mock_get_conn)
        product_row['is_active'] = False
        mock_cursor.fetchone.return_value = product_row

        product = ProductRepository().toggle_active(PRODUCT_ID)

        assert product.is_active is False
        assert "is_active = NOT is_active" in mock_cursor.execute.call_args[0][0]
