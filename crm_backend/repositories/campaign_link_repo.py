"""
Repository for the two campaign junction tables.

Only plain inserts, deletes and reads live here. Deciding which rows should
exist is the propagation service's job; nothing else writes these tables.
"""
import uuid
from typing import List, Iterable, Iterator

from sqlmodel import select
from sqlalchemy import delete, insert
from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.models.campaign import CampaignCustomerList, CampaignCustomer
from crm_backend.models.customer import Customer
from crm_backend.models.customer_list import CustomerList

# Ids per statement. Each id costs up to two bind parameters and asyncpg
# refuses statements with more than 32767.
LINK_BATCH_SIZE = 1000


def _unique(ids: Iterable[uuid.UUID]) -> List[uuid.UUID]:
    """De-duplicate while keeping first-seen order."""
    return list(dict.fromkeys(ids))


def _batches(ids: List[uuid.UUID]) -> Iterator[List[uuid.UUID]]:
    for start in range(0, len(ids), LINK_BATCH_SIZE):
        yield ids[start:start + LINK_BATCH_SIZE]


class CampaignLinkRepository:
    """Junction rows: campaign <-> customer list, campaign <-> customer."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # Campaign -> customer list (targeting)

    async def get_list_ids(self, campaign_id: uuid.UUID) -> List[uuid.UUID]:
        query = select(CampaignCustomerList.customer_list_id).where(
            CampaignCustomerList.campaign_id == campaign_id
        )
        result = await self.session.exec(query)
        return result.all()

    async def get_lists(self, campaign_id: uuid.UUID) -> List[CustomerList]:
        """Target lists of a campaign, ordered by name."""
        query = select(CustomerList).join(
            CampaignCustomerList,
            CampaignCustomerList.customer_list_id == CustomerList.id
        ).where(
            CampaignCustomerList.campaign_id == campaign_id
        ).order_by(CustomerList.name)
        result = await self.session.exec(query)
        return result.all()

    async def add_lists(self, campaign_id: uuid.UUID, customer_list_ids: Iterable[uuid.UUID]) -> int:
        inserted = 0
        for batch in _batches(_unique(customer_list_ids)):
            rows = [{"campaign_id": campaign_id, "customer_list_id": list_id} for list_id in batch]
            await self.session.exec(insert(CampaignCustomerList).values(rows))
            inserted += len(rows)
        return inserted

    async def clear_lists(self, campaign_id: uuid.UUID) -> None:
        await self.session.exec(
            delete(CampaignCustomerList).where(CampaignCustomerList.campaign_id == campaign_id)
        )

    # Campaign -> customer (derived membership)

    async def get_customer_ids(self, campaign_id: uuid.UUID) -> List[uuid.UUID]:
        query = select(CampaignCustomer.customer_id).where(
            CampaignCustomer.campaign_id == campaign_id
        )
        result = await self.session.exec(query)
        return result.all()

    async def get_customers(self, campaign_id: uuid.UUID) -> List[Customer]:
        """Customers linked to a campaign, newest first."""
        query = select(Customer).join(
            CampaignCustomer,
            CampaignCustomer.customer_id == Customer.id
        ).where(
            CampaignCustomer.campaign_id == campaign_id
        ).order_by(Customer.created_at.desc())
        result = await self.session.exec(query)
        return result.all()

    async def add_customers(self, campaign_id: uuid.UUID, customer_ids: Iterable[uuid.UUID]) -> int:
        """
        Link customers to a campaign, skipping pairs that already exist.

        Works in batches of LINK_BATCH_SIZE ids so large lists never exceed
        the driver's bind parameter limit. Returns the number of rows
        actually inserted.
        """
        inserted = 0
        for batch in _batches(_unique(customer_ids)):
            query = select(CampaignCustomer.customer_id).where(
                CampaignCustomer.campaign_id == campaign_id,
                CampaignCustomer.customer_id.in_(batch)
            )
            result = await self.session.exec(query)
            existing = set(result.all())

            rows = [
                {"campaign_id": campaign_id, "customer_id": customer_id}
                for customer_id in batch
                if customer_id not in existing
            ]
            if rows:
                await self.session.exec(insert(CampaignCustomer).values(rows))
                inserted += len(rows)
        return inserted

    async def clear_customers(self, campaign_id: uuid.UUID) -> None:
        await self.session.exec(
            delete(CampaignCustomer).where(CampaignCustomer.campaign_id == campaign_id)
        )

    async def unlink_customer(self, customer_id: uuid.UUID) -> None:
        """Drop every campaign link of one customer."""
        await self.session.exec(
            delete(CampaignCustomer).where(CampaignCustomer.customer_id == customer_id)
        )
