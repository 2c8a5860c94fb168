"""
Pydantic schemas for UserProfile entity.
"""
from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime
from splitledger.schemas.common import APIModel


class ProfileCreate(APIModel):
    """Schema for profile creation."""
    public_name: str = Field(min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    language: Optional[str] = Field(default=None, min_length=2, max_length=10)


class ProfileUpdate(APIModel):
    """Schema for profile update."""
    public_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    language: Optional[str] = Field(default=None, min_length=2, max_length=10)


class ProfileResponse(APIModel):
    """Schema for profile response."""
    id: int
    user_id: str
    public_name: str
    email: Optional[str] = None
    currency: str
    language: str
    created_at: datetime
    updated_at: datetime
