"""
Campaign repository.
"""
import uuid
from typing import List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.models.campaign import Campaign, CampaignCustomerList
from crm_backend.repositories.base import BaseRepository


class CampaignRepository(BaseRepository[Campaign]):
    """Repository for Campaign operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Campaign, session)

    async def get_targeting_list(self, user_id: uuid.UUID, customer_list_id: uuid.UUID) -> List[Campaign]:
        """Campaigns of this user that currently target the given list."""
        query = select(Campaign).join(
            CampaignCustomerList,
            CampaignCustomerList.campaign_id == Campaign.id
        ).where(
            Campaign.user_id == user_id,
            CampaignCustomerList.customer_list_id == customer_list_id
        )
        result = await self.session.exec(query)
        return result.all()

    async def count_by_status(self, user_id: uuid.UUID, status: str) -> int:
        """Count campaigns by status."""
        return await self.count(user_id, {"status": status})
