"""
Profile Repository - profiles and user_roles tables
"""
from typing import Optional, List
from app.domain.customer import Profile, ProfileUpdate, Role
from app.core.database import get_db_connection_dict

PROFILE_COLUMNS = "id, full_name, phone, address, city, created_at, updated_at"


class ProfileRepository:
    """
    Repository for user profiles and roles

    Profiles share their id with the Supabase auth user.
    """

    def find_by_id(self, user_id: str) -> Optional[Profile]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PROFILE_COLUMNS}
                FROM profiles
                WHERE id = %s
            """, (user_id,))

            row = cursor.fetchone()
            return Profile(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def upsert(self, user_id: str, data: ProfileUpdate) -> Profile:
        """Insert or update the profile of a user"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO profiles (id, full_name, phone, address, city, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, NOW(), NOW())
                ON CONFLICT (id) DO UPDATE SET
                    full_name = EXCLUDED.full_name,
                    phone = EXCLUDED.phone,
                    address = EXCLUDED.address,
                    city = EXCLUDED.city,
                    updated_at = NOW()
                RETURNING {PROFILE_COLUMNS}
            """, (user_id, data.full_name, data.phone, data.address, data.city))

            row = cursor.fetchone()
            conn.commit()
            return Profile(**row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def ensure_profile(self, user_id: str, full_name: str) -> Profile:
        """Create the profile if missing, otherwise only set full_name"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO profiles (id, full_name, created_at, updated_at)
                VALUES (%s, %s, NOW(), NOW())
                ON CONFLICT (id) DO UPDATE SET
                    full_name = EXCLUDED.full_name,
                    updated_at = NOW()
                RETURNING {PROFILE_COLUMNS}
            """, (user_id, full_name))

            row = cursor.fetchone()
            conn.commit()
            return Profile(**row)

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def count(self) -> int:
        """Number of profiles (customers count on the dashboard)"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("SELECT COUNT(*) as total FROM profiles")
            return cursor.fetchone()['total']

        finally:
            cursor.close()
            conn.close()

    # =========================================================================
    # Roles
    # =========================================================================

    def get_roles(self, user_id: str) -> List[str]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT role FROM user_roles
                WHERE user_id = %s
                ORDER BY role
            """, (user_id,))
            return [row['role'] for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def has_role(self, user_id: str, role: str = Role.ADMIN) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT 1 FROM user_roles
                WHERE user_id = %s AND role = %s
                LIMIT 1
            """, (user_id, role))
            return cursor.fetchone() is not None

        finally:
            cursor.close()
            conn.close()

    def add_role(self, user_id: str, role: str) -> None:
        """Grant a role (no-op if the user already has it)"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO user_roles (user_id, role, created_at)
                VALUES (%s, %s, NOW())
                ON CONFLICT (user_id, role) DO NOTHING
            """, (user_id, role))
            conn.commit()

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    def remove_role(self, user_id: str, role: str) -> None:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                DELETE FROM user_roles
                WHERE user_id = %s AND role = %s
            """, (user_id, role))
            conn.commit()

        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()
