"""
Order-related tables: orders, order_items, payments
"""
from sqlalchemy import Column, String, Boolean, DateTime, Text, DECIMAL, Integer, ForeignKey, text
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Order(Base):
    """
    Customer orders - one row per checkout
    """
    __tablename__ = "orders"

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))

    # Identification
    order_number = Column(String(40), nullable=False, unique=True, index=True)
    user_id = Column(UUID(as_uuid=False), index=True)  # NULL for guest checkout

    # Customer / shipping snapshot
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False, index=True)
    customer_phone = Column(String(50))
    shipping_address = Column(Text)
    shipping_city = Column(String(100))
    shipping_postal_code = Column(String(20))

    # Amounts (PKR)
    subtotal = Column(DECIMAL(12, 2), nullable=False)
    shipping_fee = Column(DECIMAL(12, 2), nullable=False, server_default="0")
    total_amount = Column(DECIMAL(12, 2), nullable=False)

    # Status
    payment_method = Column(String(30), nullable=False)
    status = Column(String(30), nullable=False, server_default="pending", index=True)

    # Manual payment proof
    screenshot_url = Column(Text)
    admin_approved = Column(Boolean)

    # Gateway reference (JazzCash retrieval reference)
    pp_txn_ref_no = Column(String(100))

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    """
    Line items, with the product name and price captured at order time
    """
    __tablename__ = "order_items"

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    order_id = Column(UUID(as_uuid=False), ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False)
    product_id = Column(UUID(as_uuid=False), ForeignKey("products.id", ondelete="SET NULL"), index=True)

    product_name = Column(String(255), nullable=False)
    size = Column(String(20))
    color = Column(String(40))

    quantity = Column(Integer, nullable=False)
    unit_price = Column(DECIMAL(12, 2), nullable=False)
    total_price = Column(DECIMAL(12, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    order = relationship("Order", back_populates="items")


class Payment(Base):
    """
    Payment attempts against an order (jazzcash, easypaisa, bank_transfer)
    """
    __tablename__ = "payments"

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    order_id = Column(UUID(as_uuid=False), ForeignKey("orders.id", ondelete="CASCADE"), index=True, nullable=False)

    provider = Column(String(30), nullable=False)
    amount = Column(DECIMAL(12, 2), nullable=False)
    currency = Column(String(3), nullable=False, server_default="PKR")
    status = Column(String(30), nullable=False, server_default="pending", index=True)
    transaction_id = Column(String(100))
    response_data = Column(JSONB)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    order = relationship("Order", back_populates="payments")
