"""
Customer list repository.
"""
from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.models.customer_list import CustomerList
from crm_backend.repositories.base import BaseRepository


class CustomerListRepository(BaseRepository[CustomerList]):
    """Repository for CustomerList operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(CustomerList, session)

    async def get_by_name(self, name: str) -> Optional[CustomerList]:
        """Get a list by name across all users (names are globally unique)."""
        query = select(CustomerList).where(CustomerList.name == name)
        result = await self.session.exec(query)
        return result.first()
