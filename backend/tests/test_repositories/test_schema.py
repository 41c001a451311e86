"""
Tests for the SQLAlchemy table declarations and schema creation
"""
from unittest.mock import patch, MagicMock

from app.core.database import Base, create_schema

STOREFRONT_TABLES = [
    'cart_items', 'contact_messages', 'order_items', 'orders',
    'payments', 'products', 'profiles', 'user_roles',
]


class TestSchema:

    @patch('app.core.database.get_engine')
    def test_create_schema_creates_all_tables(self, mock_get_engine):
        engine = MagicMock()
        mock_get_engine.return_value = engine

        with patch.object(Base.metadata, 'create_all') as mock_create_all:
            tables = create_schema()

        assert tables == STOREFRONT_TABLES
        mock_create_all.assert_called_once_with(bind=engine)

    def test_order_items_reference_orders(self):
        import app.models  # noqa: F401

        order_items = Base.metadata.tables['order_items']
        targets = {fk.target_fullname for fk in order_items.foreign_keys}

        assert 'orders.id' in targets

    def test_cart_items_unique_per_user_and_key(self):
        import app.models  # noqa: F401

        cart_items = Base.metadata.tables['cart_items']
        unique_sets = [
            {column.name for column in constraint.columns}
            for constraint in cart_items.constraints
            if constraint.__class__.__name__ == 'UniqueConstraint'
        ]

        assert {'user_id', 'item_key'} in unique_sets
