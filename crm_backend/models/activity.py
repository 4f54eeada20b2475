"""
Activity model - append-only timeline of successful changes.
Feeds the dashboard activity feed.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class Activity(SQLModel, table=True):
    """
    Activity entry. Written once when a state-changing operation succeeds,
    never updated or deleted by the application.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)

    title: str
    description: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)


# Titles for consistency
class Activities:
    # Customer list activities
    CUSTOMER_LIST_CREATED = "Created new customer list"
    CUSTOMER_LIST_UPDATED = "Updated customer list"
    CUSTOMER_LIST_DELETED = "Deleted customer list"
    CUSTOMERS_IMPORTED = "Imported customers via CSV"

    # Customer activities
    CUSTOMER_CREATED = "Added new customer"
    CUSTOMER_UPDATED = "Updated customer"
    CUSTOMER_DELETED = "Deleted customer"

    # Campaign activities
    CAMPAIGN_CREATED = "Launched new campaign"
    CAMPAIGN_UPDATED = "Updated campaign"
    CAMPAIGN_DELETED = "Deleted campaign"

    # User activities
    PROFILE_UPDATED = "Updated profile"
