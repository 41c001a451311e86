"""
Screenshot Service
Manual payment proof uploads to Supabase Storage

The image goes to the payment-screenshots bucket and the order moves to
awaiting_approval until an admin approves or rejects it.
"""
import logging
import time
from typing import Optional

from supabase import Client

from app.core.config import settings
from app.core.database import get_supabase
from app.domain.order import Order, OrderStatus
from app.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)

# Statuses in which a (new) proof can still be uploaded
UPLOADABLE_STATUSES = (OrderStatus.PENDING, OrderStatus.AWAITING_APPROVAL)


class ScreenshotError(Exception):

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def screenshot_filename(order_id: str, filename: Optional[str], content_type: str,
                        millis: Optional[int] = None) -> str:
    """
    payment-screenshot-{order_id}-{millis}.{ext}

    The extension comes from the uploaded file name, falling back to the
    image subtype (image/png -> png).
    """
    millis = millis if millis is not None else int(time.time() * 1000)
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].lower()
    else:
        ext = content_type.split("/", 1)[1].lower()
    return f"payment-screenshot-{order_id}-{millis}.{ext}"


class ScreenshotService:

    def __init__(self, order_repo: Optional[OrderRepository] = None,
                 client: Optional[Client] = None):
        self.order_repo = order_repo or OrderRepository()
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase()
        return self._client

    @staticmethod
    def validate(content_type: Optional[str], size: int) -> None:
        """Images only, at most SCREENSHOT_MAX_BYTES"""
        if not content_type or not content_type.startswith("image/"):
            raise ScreenshotError("Please select an image file")
        if size == 0:
            raise ScreenshotError("Uploaded file is empty")
        if size > settings.SCREENSHOT_MAX_BYTES:
            max_mb = settings.SCREENSHOT_MAX_BYTES // (1024 * 1024)
            raise ScreenshotError(f"File size must be less than {max_mb}MB", status_code=413)

    def upload(self, order: Order, filename: Optional[str], content_type: Optional[str],
               data: bytes) -> Order:
        """
        Store the proof and attach its public URL to the order

        Returns:
            Updated order (status awaiting_approval)
        """
        self.validate(content_type, len(data))

        if order.status not in UPLOADABLE_STATUSES:
            raise ScreenshotError(
                f"Payment proof cannot be uploaded for an order that is {order.status}",
                status_code=409
            )

        path = screenshot_filename(order.id, filename, content_type)
        bucket = self.client.storage.from_(settings.SCREENSHOT_BUCKET)
        bucket.upload(path, data, {"content-type": content_type})
        public_url = bucket.get_public_url(path)

        updated = self.order_repo.update(order.id, {
            'screenshot_url': public_url,
            'status': OrderStatus.AWAITING_APPROVAL,
        })
        logger.info(f"Payment screenshot uploaded for order {order.order_number}: {path}")
        return updated
