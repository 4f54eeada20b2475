"""
Dashboard service - headline statistics.
"""
import uuid

from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.config import settings
from crm_backend.repositories.customer_list_repo import CustomerListRepository
from crm_backend.repositories.customer_repo import CustomerRepository
from crm_backend.repositories.campaign_repo import CampaignRepository
from crm_backend.models.campaign import CampaignStatus
from crm_backend.services.activity_service import ActivityService


class DashboardService:
    """Service for dashboard statistics."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.customer_list_repo = CustomerListRepository(session)
        self.customer_repo = CustomerRepository(session)
        self.campaign_repo = CampaignRepository(session)
        self.activity_service = ActivityService(session)

    async def get_stats(self, user_id: uuid.UUID) -> dict:
        """Counts and the recent activity feed for one user."""
        return {
            "list_count": await self.customer_list_repo.count(user_id),
            "customer_count": await self.customer_repo.count(user_id),
            "active_campaign_count": await self.campaign_repo.count_by_status(
                user_id, CampaignStatus.ACTIVE
            ),
            "recent_activities": await self.activity_service.get_recent(
                user_id, settings.RECENT_ACTIVITY_LIMIT
            ),
        }
