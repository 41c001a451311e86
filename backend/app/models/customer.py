"""
Customer-side tables: profiles, user_roles, cart_items, contact_messages

profiles.id and user_roles.user_id reference auth.users in Supabase; the
auth schema is managed by Supabase so no ForeignKey is declared here.
"""
from sqlalchemy import Column, String, DateTime, Text, Integer, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.core.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=False), primary_key=True)
    full_name = Column(String(255))
    phone = Column(String(50))
    address = Column(Text)
    city = Column(String(100))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class UserRole(Base):
    """Single role column: 'admin' or 'customer'"""
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="user_roles_user_id_role_key"),)

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    user_id = Column(UUID(as_uuid=False), nullable=False, index=True)
    role = Column(String(20), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class CartItem(Base):
    """Server copy of a signed-in user's cart, keyed by product/variant"""
    __tablename__ = "cart_items"
    __table_args__ = (UniqueConstraint("user_id", "item_key", name="cart_items_user_id_item_key_key"),)

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    user_id = Column(UUID(as_uuid=False), nullable=False, index=True)
    item_key = Column(String(255), nullable=False)
    product_id = Column(UUID(as_uuid=False), nullable=False)
    size = Column(String(20))
    color = Column(String(40))
    quantity = Column(Integer, nullable=False)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50))
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
