"""
Campaigns API routes.
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.config import settings
from crm_backend.database import get_session
from crm_backend.services.campaign_service import CampaignService
from crm_backend.schemas.campaign import (
    CampaignCreate, CampaignUpdate, CampaignResponse, CampaignDetailResponse
)
from crm_backend.schemas.customer import CustomerResponse
from crm_backend.api.deps import get_current_user
from crm_backend.models.user import User

router = APIRouter(prefix=f"{settings.API_PREFIX}/campaigns", tags=["campaigns"])


@router.post("/", response_model=CampaignResponse, status_code=201)
async def create_campaign(
    campaign_data: CampaignCreate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Create a new campaign targeting one or more customer lists."""
    campaign_service = CampaignService(session)
    return await campaign_service.create(current_user.id, campaign_data)


@router.get("/", response_model=List[CampaignResponse])
async def list_campaigns(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """List the user's campaigns."""
    campaign_service = CampaignService(session)
    return await campaign_service.list(current_user.id)


@router.get("/{campaign_id}", response_model=CampaignDetailResponse)
async def get_campaign(
    campaign_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get a campaign with its target lists."""
    campaign_service = CampaignService(session)
    return await campaign_service.get_with_lists(current_user.id, campaign_id)


@router.put("/{campaign_id}", response_model=CampaignDetailResponse)
async def update_campaign(
    campaign_id: uuid.UUID,
    campaign_data: CampaignUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Update a campaign; passing customer_list_ids retargets it."""
    campaign_service = CampaignService(session)
    await campaign_service.update(current_user.id, campaign_id, campaign_data)
    return await campaign_service.get_with_lists(current_user.id, campaign_id)


@router.delete("/{campaign_id}", status_code=204)
async def delete_campaign(
    campaign_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Delete a campaign."""
    campaign_service = CampaignService(session)
    await campaign_service.delete(current_user.id, campaign_id)


@router.get("/{campaign_id}/customers", response_model=List[CustomerResponse])
async def list_campaign_customers(
    campaign_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Get all customers linked to a campaign."""
    campaign_service = CampaignService(session)
    return await campaign_service.get_customers(current_user.id, campaign_id)
