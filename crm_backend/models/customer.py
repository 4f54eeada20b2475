"""
Customer model - a contact that belongs to exactly one customer list.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class CustomerStatus:
    ACTIVE = "active"
    INACTIVE = "inactive"

    ALL = (ACTIVE, INACTIVE)


class Customer(SQLModel, table=True):
    """
    Customer entity.
    user_id always equals the owning customer list's user_id.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)
    customer_list_id: uuid.UUID = Field(foreign_key="customer_list.id", ondelete="CASCADE", index=True)

    # Contact info
    name: str = Field(index=True)
    email: str = Field(index=True)
    phone_number: Optional[str] = None

    status: str = Field(default=CustomerStatus.ACTIVE, index=True)  # active, inactive

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
