"""
Customer list model - a named grouping of customers.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class CustomerList(SQLModel, table=True):
    """
    Customer list entity.
    Names are unique across the whole system, not only per user.
    """
    __tablename__ = "customer_list"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)

    # Basic info
    name: str = Field(unique=True, index=True)
    description: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
