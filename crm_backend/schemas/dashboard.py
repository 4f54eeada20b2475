"""
Dashboard schemas.
"""
import uuid
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel


class ActivityResponse(BaseModel):
    """Activity feed entry."""
    id: uuid.UUID
    title: str
    description: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class DashboardStats(BaseModel):
    """Headline numbers for the signed-in user."""
    list_count: int
    customer_count: int
    active_campaign_count: int
    recent_activities: List[ActivityResponse]
