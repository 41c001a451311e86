"""
Catalog table
"""
from sqlalchemy import Column, String, Boolean, DateTime, Text, DECIMAL, Integer, text
from sqlalchemy.dialects.postgresql import UUID, ARRAY
from sqlalchemy.sql import func
from app.core.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(UUID(as_uuid=False), primary_key=True, server_default=text("gen_random_uuid()"))
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text)
    category = Column(String(100), nullable=False, index=True)
    price = Column(DECIMAL(12, 2), nullable=False)
    sku = Column(String(100), nullable=False, unique=True)
    inventory = Column(Integer, nullable=False, server_default="0")
    images = Column(ARRAY(Text), nullable=False, server_default="{}")
    is_active = Column(Boolean, nullable=False, server_default="true", index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
