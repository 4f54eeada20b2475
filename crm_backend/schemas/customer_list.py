"""
Customer list schemas.
"""
import uuid
from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field


class CustomerListCreate(BaseModel):
    """Create a new customer list."""
    name: str = Field(min_length=2)
    description: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Newsletter subscribers",
                "description": "Signed up through the website footer"
            }
        }


class CustomerListUpdate(BaseModel):
    """Update an existing customer list."""
    name: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None


class CustomerListResponse(BaseModel):
    """Customer list response."""
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CsvImportResponse(BaseModel):
    """CSV import result; errors lists the rejected rows (1-based)."""
    imported_count: int
    errors: List[Dict[str, Any]] = []
