"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and order items and returns Order
domain models with their line items.
"""
from typing import List, Optional, Tuple, Dict, Any
from app.domain.order import Order, OrderItem
from app.core.database import get_db_connection_dict, is_uuid

ORDER_COLUMNS = """
    id, order_number, user_id,
    customer_name, customer_email, customer_phone,
    shipping_address, shipping_city, shipping_postal_code,
    subtotal, shipping_fee, total_amount,
    payment_method, status, screenshot_url, admin_approved, pp_txn_ref_no,
    created_at, updated_at
"""

ITEM_COLUMNS = """
    id, order_id, product_id, product_name, size, color,
    quantity, unit_price, total_price
"""


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    Returns Order domain models with their items attached.
    """

    @staticmethod
    def _attach_items(cursor, order_rows: List[dict]) -> List[Order]:
        """Load the items of all given orders in ONE query and build Orders"""
        if not order_rows:
            return []

        order_ids = [row['id'] for row in order_rows]
        cursor.execute(f"""
            SELECT {ITEM_COLUMNS}
            FROM order_items
            WHERE order_id = ANY(%s::uuid[])
            ORDER BY created_at, id
        """, (order_ids,))

        items_by_order: Dict[str, List[OrderItem]] = {}
        for item in cursor.fetchall():
            items_by_order.setdefault(item['order_id'], []).append(OrderItem(**item))

        orders = []
        for row in order_rows:
            order_dict = dict(row)
            order_dict['items'] = items_by_order.get(row['id'], [])
            orders.append(Order(**order_dict))
        return orders

    def create(self, order_data: Dict[str, Any], items: List[Dict[str, Any]],
               payment_data: Optional[Dict[str, Any]] = None) -> Order:
        """
        Insert an order with its items (and optionally its payment row)
        in a single transaction

        Args:
            order_data: orders columns
            items: order_items columns (order_id is filled in here)
            payment_data: payments columns (order_id is filled in here)

        Returns:
            The created Order with items
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            columns = list(order_data.keys())
            cursor.execute(f"""
                INSERT INTO orders ({', '.join(columns)}, created_at, updated_at)
                VALUES ({', '.join(['%s'] * len(columns))}, NOW(), NOW())
                RETURNING {ORDER_COLUMNS}
            """, [order_data[c] for c in columns])
            order_row = cursor.fetchone()

            created_items = []
            for item in items:
                cursor.execute(f"""
                    INSERT INTO order_items (
                        order_id, product_id, product_name, size, color,
                        quantity, unit_price, total_price
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {ITEM_COLUMNS}
                """, (
                    order_row['id'],
                    item.get('product_id'),
                    item['product_name'],
                    item.get('size'),
                    item.get('color'),
                    item['quantity'],
                    item['unit_price'],
                    item['total_price'],
                ))
                created_items.append(OrderItem(**cursor.fetchone()))

            if payment_data is not None:
                cursor.execute("""
                    INSERT INTO payments (
                        order_id, provider, amount, currency, status, created_at, updated_at
                    ) VALUES (%s, %s, %s, %s, %s, NOW(), NOW())
                """, (
                    order_row['id'],
                    payment_data['provider'],
                    payment_data['amount'],
                    payment_data.get('currency', 'PKR'),
                    payment_data.get('status', 'pending'),
                ))

            conn.commit()

            order_dict = dict(order_row)
            order_dict['items'] = created_items
            return Order(**order_dict)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, order_id: str) -> Optional[Order]:
        """
        Find order by ID with its items

        Returns:
            Order or None if not found
        """
        if not is_uuid(order_id):
            return None

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE id = %s
            """, (order_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return self._attach_items(cursor, [row])[0]

        finally:
            cursor.close()
            conn.close()

    def find_by_order_number(self, order_number: str) -> Optional[Order]:
        """Find order by its public number (gateway reference)"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE order_number = %s
            """, (order_number,))

            row = cursor.fetchone()
            if not row:
                return None

            return self._attach_items(cursor, [row])[0]

        finally:
            cursor.close()
            conn.close()

    def find_by_user(self, user_id: str) -> List[Order]:
        """All orders of a user, newest first, with items"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE user_id = %s
                ORDER BY created_at DESC
            """, (user_id,))

            return self._attach_items(cursor, cursor.fetchall())

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        Find orders with filters (admin order management)

        Args:
            status: Filter by order status ('all' or None = no filter)
            search: Search by customer name, email, order id or order number
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of orders, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if status and status != "all":
                conditions.append("status = %s")
                params.append(status)

            if search:
                conditions.append("""(
                    customer_name ILIKE %s OR
                    customer_email ILIKE %s OR
                    id::text ILIKE %s OR
                    order_number ILIKE %s
                )""")
                search_param = f"%{search}%"
                params.extend([search_param] * 4)

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM orders
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders
                WHERE {where_clause}
                ORDER BY created_at DESC
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            return self._attach_items(cursor, cursor.fetchall()), total

        finally:
            cursor.close()
            conn.close()

    def update(self, order_id: str, data: Dict[str, Any]) -> Optional[Order]:
        """
        Update the given columns of an order (updated_at is always bumped)

        Returns:
            Updated order with items, or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            update_fields = [f"{column} = %s" for column in data.keys()]
            values = list(data.values())
            update_fields.append("updated_at = NOW()")
            values.append(order_id)

            cursor.execute(f"""
                UPDATE orders
                SET {', '.join(update_fields)}
                WHERE id = %s
                RETURNING {ORDER_COLUMNS}
            """, values)

            row = cursor.fetchone()
            if not row:
                conn.rollback()
                return None

            conn.commit()
            return self._attach_items(cursor, [row])[0]

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
