"""
Contact Service
Stores contact form messages and notifies the store admin

No mail provider is configured; the notification is written to the log
where the admin picks it up.
"""
import logging
from typing import Optional

from app.domain.customer import ContactMessage, ContactMessageCreate
from app.repositories.contact_repository import ContactRepository

logger = logging.getLogger(__name__)


class ContactService:

    def __init__(self, contact_repo: Optional[ContactRepository] = None):
        self.contact_repo = contact_repo or ContactRepository()

    def submit(self, data: ContactMessageCreate) -> ContactMessage:
        message = self.contact_repo.create(data)
        self.notify_admin(message)
        return message

    @staticmethod
    def notify_admin(message: ContactMessage) -> None:
        logger.info(
            f"Contact form submission {message.id} from {message.name} <{message.email}> "
            f"(phone {message.phone}): {message.subject}"
        )
        logger.debug(f"Contact message {message.id} body: {message.message}")
