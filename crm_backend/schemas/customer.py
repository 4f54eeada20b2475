"""
Customer schemas.
"""
import uuid
from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, ConfigDict

CustomerStatusLiteral = Literal["active", "inactive"]


class CustomerCreate(BaseModel):
    """Create a new customer in one of the caller's lists."""
    name: str = Field(min_length=2)
    email: EmailStr
    phone_number: Optional[str] = None
    status: CustomerStatusLiteral = "active"
    customer_list_id: uuid.UUID

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Alice Smith",
                "email": "alice@example.com",
                "phone_number": "+1 555 0100",
                "status": "active",
                "customer_list_id": "3fa85f64-5717-4562-b3fc-2c963f66afa6"
            }
        }


class CustomerUpdate(BaseModel):
    """Update an existing customer (partial)."""
    name: Optional[str] = Field(default=None, min_length=2)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = None
    status: Optional[CustomerStatusLiteral] = None
    customer_list_id: Optional[uuid.UUID] = None


class CustomerResponse(BaseModel):
    """Customer response."""
    id: uuid.UUID
    user_id: uuid.UUID
    customer_list_id: uuid.UUID
    name: str
    email: str
    phone_number: Optional[str]
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CsvCustomerRow(BaseModel):
    """One data row of an uploaded customer CSV."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr
    phone_number: Optional[str] = None
    status: CustomerStatusLiteral = "active"
