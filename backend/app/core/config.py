"""
Centralized application settings

All values come from the environment (or a .env file next to the backend).
Every setting has a default so the API can be imported without a database,
e.g. when running the unit tests.
"""
import json
from decimal import Decimal
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_TITLE: str = "T-Sports API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Storefront API for T-Sports (catalog, cart, checkout, orders, admin)"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database / Supabase
    DATABASE_URL: str = ""
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    SUPABASE_JWT_SECRET: str = ""
    SUPABASE_JWT_AUDIENCE: str = "authenticated"

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:5173,https://tsports.pk" or '["http://localhost:5173"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:5173,http://localhost:8080"

    # Public storefront URL, used for payment redirects
    SITE_URL: str = "http://localhost:5173"

    # Checkout
    CURRENCY: str = "PKR"
    FREE_SHIPPING_THRESHOLD: Decimal = Decimal("2000")
    SHIPPING_FEE: Decimal = Decimal("200")

    # Manual payment screenshots (Supabase Storage)
    SCREENSHOT_BUCKET: str = "payment-screenshots"
    SCREENSHOT_MAX_BYTES: int = 5 * 1024 * 1024

    # JazzCash
    JAZZCASH_MERCHANT_ID: str = ""
    JAZZCASH_PASSWORD: str = ""
    JAZZCASH_INTEGRITY_SALT: str = ""
    JAZZCASH_PAYMENT_URL: str = "https://sandbox.jazzcash.com.pk/CustomerPortal/transactionmanagement/merchantform/"

    # EasyPaisa
    EASYPAISA_STORE_ID: str = ""
    EASYPAISA_INTEGRATION_KEY: str = ""
    EASYPAISA_PAYMENT_URL: str = "https://easypay.easypaisa.com.pk/easypay/Confirm.jsf"
    # Empty = the Supabase edge function URL derived from SUPABASE_URL
    EASYPAISA_POSTBACK_URL: str = ""

    # Admin bootstrap (POST /api/v1/admin/setup)
    ADMIN_EMAIL: str = ""
    ADMIN_PASSWORD: str = ""
    ADMIN_FULL_NAME: str = "T-Sports Admin"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:5173"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
