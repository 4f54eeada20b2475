"""
Campaign model and its two junction tables.

CampaignCustomerList holds the user-chosen targeting. CampaignCustomer is
derived from it and only ever written by the propagation service.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class CampaignStatus:
    ACTIVE = "active"
    INACTIVE = "inactive"

    ALL = (ACTIVE, INACTIVE)
    DEFAULT = INACTIVE


class Campaign(SQLModel, table=True):
    """
    Campaign entity - a marketing campaign targeting one or more customer lists.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", ondelete="CASCADE", index=True)

    # Basic info
    name: str = Field(index=True)
    description: Optional[str] = None

    status: str = Field(default=CampaignStatus.DEFAULT, index=True)  # active, inactive

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class CampaignCustomerList(SQLModel, table=True):
    """Junction table: campaign -> targeted customer list."""
    __tablename__ = "campaign_customer_list"

    campaign_id: uuid.UUID = Field(foreign_key="campaign.id", ondelete="CASCADE", primary_key=True)
    customer_list_id: uuid.UUID = Field(
        foreign_key="customer_list.id", ondelete="CASCADE", primary_key=True, index=True
    )


class CampaignCustomer(SQLModel, table=True):
    """Junction table: campaign -> customer (derived membership)."""
    __tablename__ = "campaign_customer"

    campaign_id: uuid.UUID = Field(foreign_key="campaign.id", ondelete="CASCADE", primary_key=True)
    customer_id: uuid.UUID = Field(
        foreign_key="customer.id", ondelete="CASCADE", primary_key=True, index=True
    )
