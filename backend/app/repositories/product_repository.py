"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product domain models.
"""
from typing import List, Optional, Tuple
from app.domain.product import Product, PRICE_RANGES
from app.core.database import get_db_connection_dict, is_uuid

PRODUCT_COLUMNS = """
    id, name, slug, description, category, price, sku,
    inventory, images, is_active, created_at, updated_at
"""

ORDER_BY = {
    "newest": "created_at DESC",
    "price-low": "price ASC",
    "price-high": "price DESC",
    "name": "name ASC",
}


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        data = dict(row)
        data['images'] = data.get('images') or []
        return Product(**data)

    def find_by_id(self, product_id: str) -> Optional[Product]:
        """
        Find product by ID

        Returns:
            Product or None if not found
        """
        if not is_uuid(product_id):
            return None

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE id = %s
            """, (product_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_product(row)

        finally:
            cursor.close()
            conn.close()

    def find_by_id_or_slug(self, identifier: str) -> Optional[Product]:
        """
        Find product by ID or slug (product page URLs use either)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE id::text = %s OR slug = %s
                LIMIT 1
            """, (identifier, identifier))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_product(row)

        finally:
            cursor.close()
            conn.close()

    def find_by_ids(self, product_ids: List[str]) -> List[Product]:
        """Load several products at once (checkout repricing, cart hydration)"""
        if not product_ids:
            return []

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE id::text = ANY(%s)
            """, (list(product_ids),))

            return [self._map_row_to_product(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        price_range: Optional[str] = None,
        is_active: Optional[bool] = True,
        sort: str = "newest",
        limit: int = 100,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters

        Args:
            category: Case-insensitive substring match on category
            search: Search in name, category or description
            price_range: One of PRICE_RANGES keys
            is_active: Filter by active status (None = all, admin view)
            sort: One of ORDER_BY keys
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of products, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            # Build WHERE clause
            conditions = []
            params = []

            if is_active is not None:
                conditions.append("is_active = %s")
                params.append(is_active)

            if category and category.lower() != "all":
                conditions.append("category ILIKE %s")
                params.append(f"%{category}%")

            if search:
                conditions.append("(name ILIKE %s OR category ILIKE %s OR description ILIKE %s)")
                search_term = f"%{search}%"
                params.extend([search_term, search_term, search_term])

            if price_range:
                low, high = PRICE_RANGES[price_range]
                if low is not None and high is not None:
                    conditions.append("price BETWEEN %s AND %s")
                    params.extend([low, high])
                elif low is not None:
                    conditions.append("price > %s")
                    params.append(low)
                else:
                    conditions.append("price < %s")
                    params.append(high)

            where_clause = " AND ".join(conditions) if conditions else "1=1"
            order_by = ORDER_BY.get(sort, ORDER_BY["newest"])

            # Get total count
            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM products
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            # Get products
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE {where_clause}
                ORDER BY {order_by}
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            rows = cursor.fetchall()
            products = [self._map_row_to_product(row) for row in rows]

            return products, total

        finally:
            cursor.close()
            conn.close()

    def get_categories(self) -> List[dict]:
        """
        Distinct categories of active products with their product count
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT category, COUNT(*) as count
                FROM products
                WHERE is_active = true
                GROUP BY category
                ORDER BY category
            """)
            return [dict(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def create(self, data: dict) -> Product:
        """
        Insert a product

        Args:
            data: Column values (see ProductCreate.to_row)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            columns = list(data.keys())
            placeholders = ", ".join(["%s"] * len(columns))
            cursor.execute(f"""
                INSERT INTO products ({', '.join(columns)}, created_at, updated_at)
                VALUES ({placeholders}, NOW(), NOW())
                RETURNING {PRODUCT_COLUMNS}
            """, [data[c] for c in columns])

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_product(row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def update(self, product_id: str, data: dict) -> Optional[Product]:
        """
        Update the provided columns of a product

        Returns:
            Updated product, or None if it does not exist
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            update_fields = [f"{column} = %s" for column in data.keys()]
            values = list(data.values())
            update_fields.append("updated_at = NOW()")
            values.append(product_id)

            cursor.execute(f"""
                UPDATE products
                SET {', '.join(update_fields)}
                WHERE id = %s
                RETURNING {PRODUCT_COLUMNS}
            """, values)

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_product(row) if row else None

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def delete(self, product_id: str) -> bool:
        """Delete a product; returns False if it did not exist"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM products WHERE id = %s RETURNING id", (product_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def toggle_active(self, product_id: str) -> Optional[Product]:
        """Flip is_active; returns the updated product or None"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE products
                SET is_active = NOT is_active,
                    updated_at = NOW()
                WHERE id = %s
                RETURNING {PRODUCT_COLUMNS}
            """, (product_id,))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_product(row) if row else None

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
