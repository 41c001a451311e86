"""
Customer Domain Models

Profiles (one per auth user), roles, and contact form submissions.
"""
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from typing import Optional
from datetime import datetime


class Role:
    ADMIN = "admin"
    CUSTOMER = "customer"


class Profile(BaseModel):
    id: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    """User dashboard profile form"""
    full_name: str = Field(..., min_length=2)
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None


class ContactMessageCreate(BaseModel):
    """Contact page form"""
    name: str = Field(..., min_length=2)
    email: EmailStr
    phone: str = Field(..., min_length=10)
    subject: str = Field(..., min_length=5)
    message: str = Field(..., min_length=10)


class ContactMessage(ContactMessageCreate):
    id: str
    created_at: Optional[datetime] = None
