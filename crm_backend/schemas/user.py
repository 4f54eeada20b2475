"""
User profile schemas.
"""
import uuid
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field


class UserResponse(BaseModel):
    """User details response. Never carries the password hash."""
    id: uuid.UUID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    """Update own profile; current_password is always required."""
    name: Optional[str] = Field(default=None, min_length=2)
    email: Optional[EmailStr] = None
    current_password: str = Field(min_length=6)
    new_password: Optional[str] = Field(default=None, min_length=6)
    confirm_password: Optional[str] = Field(default=None, min_length=6)
