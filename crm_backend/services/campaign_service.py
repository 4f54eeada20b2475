"""
Campaign service - campaign management.
Targeting changes are delegated to the propagation service.
"""
import logging
import uuid
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.core.exceptions import NotFoundError
from crm_backend.core.transaction import atomic
from crm_backend.repositories.campaign_repo import CampaignRepository
from crm_backend.repositories.campaign_link_repo import CampaignLinkRepository
from crm_backend.models.campaign import Campaign
from crm_backend.models.customer import Customer
from crm_backend.models.activity import Activities
from crm_backend.schemas.campaign import CampaignCreate, CampaignUpdate
from crm_backend.services.activity_service import ActivityService
from crm_backend.services.propagation_service import CampaignPropagationService

logger = logging.getLogger(__name__)


class CampaignService:
    """Service for campaign operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.campaign_repo = CampaignRepository(session)
        self.link_repo = CampaignLinkRepository(session)
        self.activity_service = ActivityService(session)
        self.propagation = CampaignPropagationService(session)

    async def create(self, user_id: uuid.UUID, campaign_data: CampaignCreate) -> Campaign:
        """Create a new campaign."""
        return await self.propagation.create_campaign(user_id, campaign_data)

    async def get(self, user_id: uuid.UUID, campaign_id: uuid.UUID) -> Campaign:
        """Get a campaign by ID."""
        campaign = await self.campaign_repo.get(campaign_id, user_id)
        if not campaign:
            raise NotFoundError("Campaign", str(campaign_id))
        return campaign

    async def get_with_lists(self, user_id: uuid.UUID, campaign_id: uuid.UUID) -> dict:
        """Get a campaign together with the lists it targets."""
        campaign = await self.get(user_id, campaign_id)
        customer_lists = await self.link_repo.get_lists(campaign.id)
        return {**campaign.model_dump(), "customer_lists": customer_lists}

    async def list(self, user_id: uuid.UUID) -> List[Campaign]:
        """List campaigns, newest first."""
        return await self.campaign_repo.list(user_id)

    async def update(
        self,
        user_id: uuid.UUID,
        campaign_id: uuid.UUID,
        campaign_data: CampaignUpdate
    ) -> Campaign:
        """Update a campaign, retargeting it when customer_list_ids is given."""
        return await self.propagation.retarget_campaign(user_id, campaign_id, campaign_data)

    async def delete(self, user_id: uuid.UUID, campaign_id: uuid.UUID) -> None:
        """Delete a campaign; its junction rows cascade."""
        campaign = await self.get(user_id, campaign_id)
        campaign_name = campaign.name

        async with atomic(self.session):
            await self.campaign_repo.delete(campaign)
            await self.activity_service.record(
                user_id=user_id,
                title=Activities.CAMPAIGN_DELETED,
                description=f'"{campaign_name}"'
            )

        logger.info(f"Campaign {campaign_id} deleted by user {user_id}")

    async def get_customers(self, user_id: uuid.UUID, campaign_id: uuid.UUID) -> List[Customer]:
        """Customers linked to a campaign."""
        campaign = await self.get(user_id, campaign_id)
        return await self.link_repo.get_customers(campaign.id)
