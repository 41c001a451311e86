"""
Contact Repository - contact_messages table
"""
from app.domain.customer import ContactMessage, ContactMessageCreate
from app.core.database import get_db_connection_dict


class ContactRepository:

    def create(self, data: ContactMessageCreate) -> ContactMessage:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO contact_messages (name, email, phone, subject, message, created_at)
                VALUES (%s, %s, %s, %s, %s, NOW())
                RETURNING id, name, email, phone, subject, message, created_at
            """, (data.name, data.email, data.phone, data.subject, data.message))

            row = cursor.fetchone()
            conn.commit()
            return ContactMessage(**row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
