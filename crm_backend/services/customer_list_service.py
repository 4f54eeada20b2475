"""
Customer list service - list management.
"""
import logging
import uuid
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.core.exceptions import NotFoundError, AlreadyExistsError
from crm_backend.core.transaction import atomic
from crm_backend.repositories.customer_list_repo import CustomerListRepository
from crm_backend.repositories.customer_repo import CustomerRepository
from crm_backend.models.customer_list import CustomerList
from crm_backend.models.customer import Customer
from crm_backend.models.activity import Activities
from crm_backend.schemas.customer_list import CustomerListCreate, CustomerListUpdate
from crm_backend.schemas.common import partial_update
from crm_backend.services.activity_service import ActivityService

logger = logging.getLogger(__name__)


class CustomerListService:
    """Service for customer list operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.customer_list_repo = CustomerListRepository(session)
        self.customer_repo = CustomerRepository(session)
        self.activity_service = ActivityService(session)

    async def create(self, user_id: uuid.UUID, list_data: CustomerListCreate) -> CustomerList:
        """Create a new customer list."""
        await self._ensure_name_free(list_data.name)

        data = list_data.model_dump()
        data["user_id"] = user_id

        async with atomic(self.session):
            customer_list = await self.customer_list_repo.create(data)
            await self.activity_service.record(
                user_id=user_id,
                title=Activities.CUSTOMER_LIST_CREATED,
                description=f'"{customer_list.name}"'
            )

        return customer_list

    async def get(self, user_id: uuid.UUID, customer_list_id: uuid.UUID) -> CustomerList:
        """Get a customer list by ID."""
        customer_list = await self.customer_list_repo.get(customer_list_id, user_id)
        if not customer_list:
            raise NotFoundError("Customer list", str(customer_list_id))
        return customer_list

    async def list(self, user_id: uuid.UUID) -> List[CustomerList]:
        """List customer lists, newest first."""
        return await self.customer_list_repo.list(user_id)

    async def update(
        self,
        user_id: uuid.UUID,
        customer_list_id: uuid.UUID,
        list_data: CustomerListUpdate
    ) -> CustomerList:
        """Update a customer list (partial)."""
        customer_list = await self.get(user_id, customer_list_id)

        update_data = partial_update(list_data, required=("name",))
        if "name" in update_data and update_data["name"] != customer_list.name:
            await self._ensure_name_free(update_data["name"])

        async with atomic(self.session):
            customer_list = await self.customer_list_repo.update(customer_list, update_data)
            await self.activity_service.record(
                user_id=user_id,
                title=Activities.CUSTOMER_LIST_UPDATED,
                description=f'"{customer_list.name}"'
            )

        return customer_list

    async def delete(self, user_id: uuid.UUID, customer_list_id: uuid.UUID) -> None:
        """
        Delete a customer list.
        Its customers and every junction row pointing at either cascade;
        campaigns that targeted it stay.
        """
        customer_list = await self.get(user_id, customer_list_id)
        list_name = customer_list.name

        async with atomic(self.session):
            await self.customer_list_repo.delete(customer_list)
            await self.activity_service.record(
                user_id=user_id,
                title=Activities.CUSTOMER_LIST_DELETED,
                description=f'"{list_name}"'
            )

        logger.info(f"Customer list {customer_list_id} deleted by user {user_id}")

    async def get_customers(self, user_id: uuid.UUID, customer_list_id: uuid.UUID) -> List[Customer]:
        """Customers in a list, newest first."""
        customer_list = await self.get(user_id, customer_list_id)
        return await self.customer_repo.list_by_list(user_id, customer_list.id)

    async def _ensure_name_free(self, name: str) -> None:
        existing = await self.customer_list_repo.get_by_name(name)
        if existing:
            raise AlreadyExistsError("Customer list", "name", name)
