"""
Authentication schemas.
"""
from pydantic import BaseModel, EmailStr, Field

from crm_backend.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    """User registration request."""
    name: str = Field(min_length=2)
    email: EmailStr
    password: str = Field(min_length=6)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Jane Doe",
                "email": "jane@company.com",
                "password": "securepassword123"
            }
        }


class LoginRequest(BaseModel):
    """User login request."""
    email: EmailStr
    password: str = Field(min_length=6)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "jane@company.com",
                "password": "securepassword123"
            }
        }


class AuthResponse(BaseModel):
    """User plus bearer token, returned by register and login."""
    user: UserResponse
    token: str
    token_type: str = "bearer"
