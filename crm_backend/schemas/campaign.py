"""
Campaign schemas.
"""
import uuid
from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field

from crm_backend.schemas.customer_list import CustomerListResponse

CampaignStatusLiteral = Literal["active", "inactive"]


class CampaignCreate(BaseModel):
    """Create a new campaign targeting at least one customer list."""
    name: str = Field(min_length=2)
    description: Optional[str] = None
    status: CampaignStatusLiteral = "inactive"
    customer_list_ids: List[uuid.UUID] = Field(min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Spring Sale",
                "description": "20% off everything",
                "status": "active",
                "customer_list_ids": ["3fa85f64-5717-4562-b3fc-2c963f66afa6"]
            }
        }


class CampaignUpdate(BaseModel):
    """
    Update an existing campaign.
    Leaving customer_list_ids out keeps the current targeting.
    """
    name: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None
    status: Optional[CampaignStatusLiteral] = None
    customer_list_ids: Optional[List[uuid.UUID]] = Field(default=None, min_length=1)


class CampaignResponse(BaseModel):
    """Campaign response."""
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    description: Optional[str]
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CampaignDetailResponse(CampaignResponse):
    """Campaign with its target lists."""
    customer_lists: List[CustomerListResponse] = []
