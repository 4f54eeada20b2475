"""
User model - the principal that owns every other entity.
"""
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    User model with authentication and profile info.
    Customer lists, customers, campaigns and activities are all scoped to a user.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Profile
    name: str

    # Auth
    email: str = Field(unique=True, index=True)
    password_hash: str

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
