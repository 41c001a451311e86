"""
Payment Repository - payments table
"""
from typing import Dict, Any
from psycopg2.extras import Json

from app.domain.order import Payment
from app.core.database import get_db_connection_dict

PAYMENT_COLUMNS = """
    id, order_id, provider, amount, currency, status,
    transaction_id, response_data, created_at, updated_at
"""


class PaymentRepository:

    def create(self, data: Dict[str, Any]) -> Payment:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO payments (
                    order_id, provider, amount, currency, status,
                    transaction_id, response_data, created_at, updated_at
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, NOW(), NOW())
                RETURNING {PAYMENT_COLUMNS}
            """, (
                data['order_id'],
                data['provider'],
                data['amount'],
                data.get('currency', 'PKR'),
                data.get('status', 'pending'),
                data.get('transaction_id'),
                Json(data['response_data']) if data.get('response_data') is not None else None,
            ))

            row = cursor.fetchone()
            conn.commit()
            return Payment(**row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def update_for_order(self, order_id: str, data: Dict[str, Any]) -> int:
        """
        Update every payment row of an order

        Returns:
            Number of rows updated
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            update_fields = []
            values = []
            for column, value in data.items():
                update_fields.append(f"{column} = %s")
                values.append(Json(value) if column == 'response_data' else value)
            update_fields.append("updated_at = NOW()")
            values.append(order_id)

            cursor.execute(f"""
                UPDATE payments
                SET {', '.join(update_fields)}
                WHERE order_id = %s
            """, values)

            updated = cursor.rowcount
            conn.commit()
            return updated

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
