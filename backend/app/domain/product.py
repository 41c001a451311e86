"""
Product Domain Model

Represents a catalog product of the T-Sports store.
This is the single source of truth for product data structure.
"""
import re
from pydantic import BaseModel, Field, ConfigDict, HttpUrl, field_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")

# Category page price filter buckets (PKR)
PRICE_RANGES = {
    "under-2000": (None, Decimal("2000")),
    "2000-5000": (Decimal("2000"), Decimal("5000")),
    "above-5000": (Decimal("5000"), None),
}

SORT_OPTIONS = ("newest", "price-low", "price-high", "name")


class Product(BaseModel):
    """
    Product domain model - represents a product in our catalog

    Fields:
        id: Product ID (uuid)
        name: Display name
        slug: URL-friendly identifier (lowercase letters, digits, hyphens)
        description: Long description (optional)
        category: Sport / category name (Football, Cricket, Jerseys, ...)
        price: Unit price in PKR
        sku: Stock Keeping Unit
        inventory: Units available
        images: Image URLs, first one is the primary image
        is_active: Whether the product is visible in the storefront
        created_at: When product was created
        updated_at: When product was last updated
    """

    id: str = Field(..., description="Product ID")
    name: str = Field(..., description="Product name")
    slug: str = Field(..., description="URL-friendly identifier")
    description: Optional[str] = Field(None, description="Product description")
    category: str = Field(..., description="Product category")
    price: Decimal = Field(..., description="Unit price (PKR)", ge=0)
    sku: str = Field(..., description="Stock Keeping Unit")
    inventory: int = Field(0, description="Units in stock")
    images: List[str] = Field(default_factory=list, description="Image URLs")
    is_active: bool = Field(True, description="Visible in storefront")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    @property
    def primary_image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    @property
    def is_in_stock(self) -> bool:
        return self.inventory > 0

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Decimal price is converted to float for JSON compatibility.
        """
        data = self.model_dump()
        data['price'] = float(self.price)
        data['primary_image'] = self.primary_image
        data['is_in_stock'] = self.is_in_stock
        return data


class ProductCreate(BaseModel):
    """Admin form for creating a product"""
    name: str = Field(..., min_length=3)
    slug: str = Field(..., min_length=3)
    description: Optional[str] = ""
    category: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0)
    sku: str = Field(..., min_length=3)
    inventory: int = Field(..., ge=0)
    images: List[HttpUrl] = Field(default_factory=list)

    @field_validator("slug")
    @classmethod
    def slug_format(cls, v: str) -> str:
        if not SLUG_PATTERN.match(v):
            raise ValueError("Slug must contain only lowercase letters, numbers, and hyphens")
        return v

    def to_row(self) -> dict:
        data = self.model_dump()
        data['images'] = [str(url) for url in self.images]
        return data


class ProductUpdate(BaseModel):
    """Admin form for updating a product; only provided fields change"""
    name: Optional[str] = Field(None, min_length=3)
    slug: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1)
    price: Optional[Decimal] = Field(None, gt=0)
    sku: Optional[str] = Field(None, min_length=3)
    inventory: Optional[int] = Field(None, ge=0)
    images: Optional[List[HttpUrl]] = None
    is_active: Optional[bool] = None

    @field_validator("slug")
    @classmethod
    def slug_format(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not SLUG_PATTERN.match(v):
            raise ValueError("Slug must contain only lowercase letters, numbers, and hyphens")
        return v

    def to_row(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        if 'images' in data:
            data['images'] = [str(url) for url in self.images or []]
        return data
