"""
Activity service - the activity timeline.
"""
import uuid
from typing import Optional, List

from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.repositories.activity_repo import ActivityRepository
from crm_backend.models.activity import Activity


class ActivityService:
    """Service for activity recording."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.activity_repo = ActivityRepository(session)

    async def record(
        self,
        user_id: uuid.UUID,
        title: str,
        description: Optional[str] = None
    ) -> Activity:
        """
        Append an activity entry.

        Call it inside the unit of work of the change it describes, so the
        entry only becomes visible if that change commits.
        """
        return await self.activity_repo.log(
            user_id=user_id,
            title=title,
            description=description
        )

    async def get_recent(self, user_id: uuid.UUID, limit: int = 10) -> List[Activity]:
        """Get recent activity for the dashboard."""
        return await self.activity_repo.get_recent(user_id, limit)
