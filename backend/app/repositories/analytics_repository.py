"""
Analytics Repository - read-only aggregates for the admin dashboard

Only orders with status 'paid' count as sales.
"""
from typing import List, Dict
from app.core.database import get_db_connection_dict


class AnalyticsRepository:
    """
    Dashboard queries

    Each method opens its own connection; get_dashboard_stats bundles the
    headline counters into a single round trip.
    """

    def get_dashboard_stats(self) -> Dict:
        """
        Total paid sales, paid order count, product count, customer count
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    (SELECT COALESCE(SUM(total_amount), 0) FROM orders WHERE status = 'paid') as total_sales,
                    (SELECT COUNT(*) FROM orders WHERE status = 'paid') as total_orders,
                    (SELECT COUNT(*) FROM products) as total_products,
                    (SELECT COUNT(*) FROM profiles) as total_customers
            """)
            return dict(cursor.fetchone())

        finally:
            cursor.close()
            conn.close()

    def get_daily_sales(self, days: int = 7) -> List[Dict]:
        """
        Paid sales and order count per day for the last ``days`` days,
        oldest first, with zero rows for days without orders
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                WITH day_series AS (
                    SELECT generate_series(
                        CURRENT_DATE - (%s - 1) * INTERVAL '1 day',
                        CURRENT_DATE,
                        INTERVAL '1 day'
                    )::date as day
                )
                SELECT
                    ds.day,
                    COALESCE(SUM(o.total_amount), 0) as sales,
                    COUNT(o.id) as orders
                FROM day_series ds
                LEFT JOIN orders o
                    ON o.created_at::date = ds.day
                   AND o.status = 'paid'
                GROUP BY ds.day
                ORDER BY ds.day
            """, (days,))
            return [dict(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def get_top_products(self, limit: int = 5) -> List[Dict]:
        """Products ranked by paid sales amount"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    oi.product_name as name,
                    SUM(oi.quantity) as quantity,
                    SUM(oi.total_price) as sales
                FROM order_items oi
                JOIN orders o ON o.id = oi.order_id
                WHERE o.status = 'paid'
                GROUP BY oi.product_name
                ORDER BY sales DESC
                LIMIT %s
            """, (limit,))
            return [dict(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def get_sales_by_category(self) -> List[Dict]:
        """Paid sales per product category"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    COALESCE(p.category, 'Uncategorized') as category,
                    SUM(oi.total_price) as sales
                FROM order_items oi
                JOIN orders o ON o.id = oi.order_id
                LEFT JOIN products p ON p.id = oi.product_id
                WHERE o.status = 'paid'
                GROUP BY COALESCE(p.category, 'Uncategorized')
                ORDER BY sales DESC
            """)
            return [dict(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()
