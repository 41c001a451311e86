"""
Cart Repository - server copy of signed-in users' carts (cart_items)

Rows only hold key, product, variant and quantity. Display fields (name,
price, image) are filled in from the catalog by CartService.
"""
from typing import List, Dict, Any
from app.domain.cart import CartLine
from app.core.database import get_db_connection_dict

CART_COLUMNS = "item_key, product_id, size, color, quantity, updated_at"


class CartRepository:

    @staticmethod
    def _map_row_to_line(row: dict) -> CartLine:
        return CartLine(
            product_id=row['product_id'],
            quantity=row['quantity'],
            size=row.get('size'),
            color=row.get('color'),
            updated_at=row['updated_at'],
        )

    def find_by_user(self, user_id: str) -> List[CartLine]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {CART_COLUMNS}
                FROM cart_items
                WHERE user_id = %s
                ORDER BY updated_at
            """, (user_id,))

            return [self._map_row_to_line(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def save_line(self, user_id: str, line: CartLine) -> None:
        """Insert or overwrite one key of the user's cart"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO cart_items (user_id, item_key, product_id, size, color, quantity, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (user_id, item_key) DO UPDATE SET
                    quantity = EXCLUDED.quantity,
                    updated_at = EXCLUDED.updated_at
            """, self._line_params(user_id, line))
            conn.commit()

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def delete_line(self, user_id: str, key: str) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                DELETE FROM cart_items
                WHERE user_id = %s AND item_key = %s
            """, (user_id, key))
            deleted = cursor.rowcount > 0
            conn.commit()
            return deleted

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def clear(self, user_id: str) -> int:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM cart_items WHERE user_id = %s", (user_id,))
            deleted = cursor.rowcount
            conn.commit()
            return deleted

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def replace(self, user_id: str, lines: List[CartLine]) -> None:
        """
        Replace the whole server cart in one transaction (used after merge)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM cart_items WHERE user_id = %s", (user_id,))
            for line in lines:
                cursor.execute("""
                    INSERT INTO cart_items (user_id, item_key, product_id, size, color, quantity, updated_at)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                """, self._line_params(user_id, line))
            conn.commit()

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    @staticmethod
    def _line_params(user_id: str, line: CartLine) -> tuple:
        return (
            user_id,
            line.key,
            line.product_id,
            line.size,
            line.color,
            line.quantity,
            line.updated_at,
        )
