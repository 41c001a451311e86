"""
Admin Setup Service
Bootstraps the store administrator account

Creates the configured admin user through the Supabase auth admin API (or
finds it when it already exists), makes sure it has a profile, grants the
admin role and removes the customer role that the signup trigger adds.
"""
import logging
from typing import Optional, Dict

from supabase import Client

from app.core.config import settings
from app.core.database import get_supabase
from app.domain.customer import Role
from app.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

USERS_PER_PAGE = 1000


class AdminSetupError(Exception):
    pass


class AdminSetupService:

    def __init__(self, client: Optional[Client] = None,
                 profile_repo: Optional[ProfileRepository] = None):
        self._client = client
        self.profile_repo = profile_repo or ProfileRepository()

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase()
        return self._client

    def _find_user_id(self, email: str) -> str:
        """Scan the auth users page by page for the email"""
        page = 1
        while True:
            users = self.client.auth.admin.list_users(page=page, per_page=USERS_PER_PAGE)
            for user in users:
                if (user.email or "").lower() == email.lower():
                    return user.id
            if len(users) < USERS_PER_PAGE:
                break
            page += 1
        raise AdminSetupError("User exists but could not be found")

    def ensure_admin(self, email: Optional[str] = None, password: Optional[str] = None,
                     full_name: Optional[str] = None) -> Dict:
        """
        Create or verify the admin user

        Returns:
            {created, user_id, email, message}
        """
        email = email or settings.ADMIN_EMAIL
        password = password or settings.ADMIN_PASSWORD
        full_name = full_name or settings.ADMIN_FULL_NAME

        if not email or not password:
            raise AdminSetupError("ADMIN_EMAIL / ADMIN_PASSWORD not configured")

        logger.info(f"Creating admin user {email}...")
        created = True
        try:
            response = self.client.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"full_name": full_name},
            })
            user_id = response.user.id
        except Exception as e:
            if "already" not in str(e).lower():
                raise
            logger.info("Admin user already exists, fetching user...")
            created = False
            user_id = self._find_user_id(email)

        self.profile_repo.ensure_profile(user_id, full_name)
        self.profile_repo.add_role(user_id, Role.ADMIN)
        self.profile_repo.remove_role(user_id, Role.CUSTOMER)

        message = (
            "Admin user created successfully" if created
            else "Admin user already exists and role verified"
        )
        logger.info(f"Admin setup complete for {user_id}: {message}")

        return {
            'created': created,
            'user_id': user_id,
            'email': email,
            'message': message,
        }
