"""
Customer repository with bulk operations.
"""
import uuid
from typing import List, Iterable

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.models.customer import Customer
from crm_backend.repositories.base import BaseRepository


class CustomerRepository(BaseRepository[Customer]):
    """Repository for Customer operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Customer, session)

    async def list_by_list(self, user_id: uuid.UUID, customer_list_id: uuid.UUID) -> List[Customer]:
        """Customers currently in one list, newest first."""
        query = select(Customer).where(
            Customer.user_id == user_id,
            Customer.customer_list_id == customer_list_id
        ).order_by(Customer.created_at.desc())
        result = await self.session.exec(query)
        return result.all()

    async def get_ids_in_lists(
        self,
        user_id: uuid.UUID,
        customer_list_ids: Iterable[uuid.UUID]
    ) -> List[uuid.UUID]:
        """Distinct ids of customers belonging to any of the given lists."""
        customer_list_ids = list(customer_list_ids)
        if not customer_list_ids:
            return []
        query = select(Customer.id).where(
            Customer.user_id == user_id,
            Customer.customer_list_id.in_(customer_list_ids)
        ).distinct()
        result = await self.session.exec(query)
        return result.all()

    async def bulk_create(
        self,
        user_id: uuid.UUID,
        customer_list_id: uuid.UUID,
        customers_data: List[dict]
    ) -> List[Customer]:
        """Create multiple customers in one list at once."""
        customers = []
        for data in customers_data:
            customer = Customer(
                **data,
                user_id=user_id,
                customer_list_id=customer_list_id
            )
            self.session.add(customer)
            customers.append(customer)

        await self.session.flush()
        return customers
