"""
Order Domain Models

Represents order-related entities of the storefront: orders, their line
items, payments, and the checkout form that creates them.
"""
from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


class OrderStatus:
    """Order lifecycle values stored in orders.status"""
    PENDING = "pending"
    AWAITING_APPROVAL = "awaiting_approval"
    CONFIRMED = "confirmed"
    PAID = "paid"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    ALL = (PENDING, AWAITING_APPROVAL, CONFIRMED, PAID, SHIPPED, DELIVERED, CANCELLED)


class PaymentStatus:
    PENDING = "pending"
    INITIATED = "initiated"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentMethod:
    JAZZCASH = "jazzcash"
    EASYPAISA = "easypaisa"
    BANK_TRANSFER = "bank_transfer"
    COD = "cod"

    # Cash on delivery is shown in the storefront as "coming soon"
    AVAILABLE = (JAZZCASH, EASYPAISA, BANK_TRANSFER)


class OrderItem(BaseModel):
    """
    Order Item domain model - a line item captured at order time

    Fields:
        id: Order item ID
        order_id: Parent order ID
        product_id: Catalog product (None if the product was deleted)
        product_name: Product name at order time
        size / color: Variant chosen in the cart
        quantity: Units ordered
        unit_price: Price per unit at order time
        total_price: unit_price * quantity
    """

    id: Optional[str] = Field(None, description="Order item ID")
    order_id: Optional[str] = Field(None, description="Parent order ID")
    product_id: Optional[str] = Field(None, description="Product catalog ID")
    product_name: str = Field(..., description="Product name at order time")
    size: Optional[str] = None
    color: Optional[str] = None
    quantity: int = Field(..., description="Quantity ordered", ge=1)
    unit_price: Decimal = Field(..., description="Price per unit", ge=0)
    total_price: Decimal = Field(..., description="Total for line item", ge=0)

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        for field in ['unit_price', 'total_price']:
            if data.get(field) is not None:
                data[field] = float(data[field])
        return data


class Order(BaseModel):
    """
    Order domain model - represents a customer order

    Amounts are in PKR. ``items`` is populated by the repository when the
    query loads line items.
    """

    id: str = Field(..., description="Order ID")
    order_number: str = Field(..., description="Human-facing order number")
    user_id: Optional[str] = Field(None, description="Auth user (None for guests)")

    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    shipping_address: Optional[str] = None
    shipping_city: Optional[str] = None
    shipping_postal_code: Optional[str] = None

    subtotal: Decimal = Field(Decimal('0'), ge=0)
    shipping_fee: Decimal = Field(Decimal('0'), ge=0)
    total_amount: Decimal = Field(..., ge=0)

    payment_method: Optional[str] = None
    status: str = Field(OrderStatus.PENDING)
    screenshot_url: Optional[str] = None
    admin_approved: Optional[bool] = None
    pp_txn_ref_no: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    items: List[OrderItem] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_paid(self) -> bool:
        return self.status == OrderStatus.PAID

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> dict:
        data = self.model_dump()
        for field in ['subtotal', 'shipping_fee', 'total_amount']:
            data[field] = float(data[field])
        data['items'] = [item.to_dict() for item in self.items]
        data['item_count'] = self.item_count
        return data


class Payment(BaseModel):
    id: str
    order_id: str
    provider: str
    amount: Decimal
    currency: str = "PKR"
    status: str = PaymentStatus.PENDING
    transaction_id: Optional[str] = None
    response_data: Optional[dict] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Checkout form
# =============================================================================

class CheckoutItem(BaseModel):
    """Cart line as sent by the checkout page; prices are looked up server side"""
    product_id: str
    quantity: int = Field(..., ge=1)
    size: Optional[str] = None
    color: Optional[str] = None


class CheckoutRequest(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=10)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    payment_method: str = PaymentMethod.JAZZCASH
    agree_terms: bool = False
    save_info: bool = False
    items: List[CheckoutItem] = Field(..., min_length=1)

    @field_validator("first_name", "last_name", "address", "city", "postal_code", "phone")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @property
    def customer_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class PaymentRequest(BaseModel):
    """
    Gateway payment request from the storefront

    Both fields are optional here so a missing value is reported as a
    payment error (400) instead of a validation error.
    """
    order_id: Optional[str] = Field(None, alias="orderId")
    amount: Optional[Decimal] = Field(None, ge=0)
    currency: str = "PKR"

    model_config = ConfigDict(populate_by_name=True)


class OrderStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def known_status(cls, v: str) -> str:
        if v not in OrderStatus.ALL:
            raise ValueError(f"Unknown order status '{v}'. Valid: {', '.join(OrderStatus.ALL)}")
        return v
