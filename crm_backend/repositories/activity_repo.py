"""
Activity repository.
"""
import uuid
from typing import Optional, List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.models.activity import Activity
from crm_backend.repositories.base import BaseRepository


class ActivityRepository(BaseRepository[Activity]):
    """Repository for Activity operations. Append and read only."""

    def __init__(self, session: AsyncSession):
        super().__init__(Activity, session)

    async def log(
        self,
        user_id: uuid.UUID,
        title: str,
        description: Optional[str] = None
    ) -> Activity:
        """Stage an activity entry; it commits with the surrounding unit of work."""
        activity = Activity(
            user_id=user_id,
            title=title,
            description=description
        )
        self.session.add(activity)
        await self.session.flush()
        return activity

    async def get_recent(self, user_id: uuid.UUID, limit: int = 10) -> List[Activity]:
        """Get recent activity for a user, newest first."""
        query = select(Activity).where(
            Activity.user_id == user_id
        ).order_by(Activity.created_at.desc()).limit(limit)
        result = await self.session.exec(query)
        return result.all()
