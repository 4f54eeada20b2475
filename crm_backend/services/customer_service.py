"""
Customer service - customer management.
"""
import logging
import uuid
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.config import settings
from crm_backend.core.exceptions import NotFoundError
from crm_backend.core.transaction import atomic
from crm_backend.repositories.customer_repo import CustomerRepository
from crm_backend.repositories.customer_list_repo import CustomerListRepository
from crm_backend.models.customer import Customer
from crm_backend.models.activity import Activities
from crm_backend.schemas.customer import CustomerCreate, CustomerUpdate
from crm_backend.schemas.common import partial_update
from crm_backend.services.activity_service import ActivityService
from crm_backend.services.propagation_service import CampaignPropagationService

logger = logging.getLogger(__name__)

CUSTOMER_REQUIRED_FIELDS = ("name", "email", "status", "customer_list_id")


class CustomerService:
    """Service for customer operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.customer_repo = CustomerRepository(session)
        self.customer_list_repo = CustomerListRepository(session)
        self.activity_service = ActivityService(session)
        self.propagation = CampaignPropagationService(session)

    async def create(self, user_id: uuid.UUID, customer_data: CustomerCreate) -> Customer:
        """
        Create a customer in one of the owner's lists.
        Campaigns already targeting that list pick the customer up.
        """
        customer_list = await self.customer_list_repo.get(customer_data.customer_list_id, user_id)
        if not customer_list:
            raise NotFoundError("Customer list", str(customer_data.customer_list_id))

        data = customer_data.model_dump()
        data["user_id"] = user_id

        async with atomic(self.session):
            customer = await self.customer_repo.create(data)
            await self.propagation.extend_on_import(user_id, customer_list.id, [customer.id])
            await self.activity_service.record(
                user_id=user_id,
                title=Activities.CUSTOMER_CREATED,
                description=f'"{customer.name}" added to "{customer_list.name}"'
            )

        return customer

    async def get(self, user_id: uuid.UUID, customer_id: uuid.UUID) -> Customer:
        """Get a customer by ID."""
        customer = await self.customer_repo.get(customer_id, user_id)
        if not customer:
            raise NotFoundError("Customer", str(customer_id))
        return customer

    async def list(self, user_id: uuid.UUID) -> List[Customer]:
        """List customers, newest first."""
        return await self.customer_repo.list(user_id)

    async def update(
        self,
        user_id: uuid.UUID,
        customer_id: uuid.UUID,
        customer_data: CustomerUpdate
    ) -> Customer:
        """
        Update a customer (partial).

        Moving the customer to another list requires that list to be owned by
        the caller; the customer's campaign links then follow the new list.
        """
        customer = await self.get(user_id, customer_id)
        update_data = partial_update(customer_data, required=CUSTOMER_REQUIRED_FIELDS)

        new_list_id = update_data.get("customer_list_id")
        moved = new_list_id is not None and new_list_id != customer.customer_list_id
        if moved:
            target_list = await self.customer_list_repo.get(new_list_id, user_id)
            if not target_list:
                raise NotFoundError("Customer list", str(new_list_id))

        async with atomic(self.session):
            customer = await self.customer_repo.update(customer, update_data)
            if moved and settings.SYNC_CAMPAIGNS_ON_REASSIGN:
                await self.propagation.sync_customer(user_id, customer)
            await self.activity_service.record(
                user_id=user_id,
                title=Activities.CUSTOMER_UPDATED,
                description=f'"{customer.name}"'
            )

        if moved:
            logger.info(f"Customer {customer_id} moved to list {new_list_id}")
        return customer

    async def delete(self, user_id: uuid.UUID, customer_id: uuid.UUID) -> None:
        """Delete a customer; its campaign links cascade."""
        customer = await self.get(user_id, customer_id)
        customer_name = customer.name

        async with atomic(self.session):
            await self.customer_repo.delete(customer)
            await self.activity_service.record(
                user_id=user_id,
                title=Activities.CUSTOMER_DELETED,
                description=f'"{customer_name}"'
            )
