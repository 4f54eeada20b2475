"""
Campaign propagation service.

Keeps the derived campaign -> customer links consistent with campaign
targeting: for every campaign, the linked customers are exactly the union of
the customers in its target lists. The links are materialized in the
campaign_customer table and rewritten here, and only here, whenever one of
the inputs changes:

* a campaign is created (links built from its target lists)
* a campaign is retargeted (targeting and links fully replaced)
* customers are added to a list already targeted by campaigns (links extended)
* a customer moves to another list (that customer's links re-derived)

Create and retarget own their transaction. Extension and re-derivation run
inside the caller's transaction so they commit together with the customer
rows that triggered them.
"""
import logging
import uuid
from typing import List, Iterable, Sequence

from sqlmodel.ext.asyncio.session import AsyncSession

from crm_backend.core.exceptions import NotFoundError, ValidationError
from crm_backend.core.transaction import atomic
from crm_backend.repositories.campaign_repo import CampaignRepository
from crm_backend.repositories.campaign_link_repo import CampaignLinkRepository
from crm_backend.repositories.customer_repo import CustomerRepository
from crm_backend.repositories.customer_list_repo import CustomerListRepository
from crm_backend.models.campaign import Campaign
from crm_backend.models.customer import Customer
from crm_backend.models.customer_list import CustomerList
from crm_backend.models.activity import Activities
from crm_backend.schemas.campaign import CampaignCreate, CampaignUpdate
from crm_backend.schemas.common import partial_update
from crm_backend.services.activity_service import ActivityService

logger = logging.getLogger(__name__)

CAMPAIGN_REQUIRED_FIELDS = ("name", "status")


class CampaignPropagationService:
    """Service maintaining campaign targeting and derived membership."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.campaign_repo = CampaignRepository(session)
        self.link_repo = CampaignLinkRepository(session)
        self.customer_repo = CustomerRepository(session)
        self.customer_list_repo = CustomerListRepository(session)
        self.activity_service = ActivityService(session)

    async def resolve_target_lists(
        self,
        user_id: uuid.UUID,
        customer_list_ids: Sequence[uuid.UUID]
    ) -> List[CustomerList]:
        """
        Resolve target list ids for an owner.

        Raises ValidationError for an empty selection and NotFoundError naming
        the first id (in the caller's order) that the owner does not have.
        """
        if not customer_list_ids:
            raise ValidationError(
                "At least one customer list must be selected",
                field="customer_list_ids"
            )

        lists = await self.customer_list_repo.get_many(customer_list_ids, user_id)
        found = {customer_list.id: customer_list for customer_list in lists}
        for list_id in customer_list_ids:
            if list_id not in found:
                raise NotFoundError("Customer list", str(list_id))

        return [found[list_id] for list_id in dict.fromkeys(customer_list_ids)]

    async def create_campaign(self, user_id: uuid.UUID, campaign_data: CampaignCreate) -> Campaign:
        """Create a campaign, its targeting, and its derived customer links."""
        data = campaign_data.model_dump(exclude={"customer_list_ids"})
        target_lists = await self.resolve_target_lists(user_id, campaign_data.customer_list_ids)
        list_ids = [customer_list.id for customer_list in target_lists]

        async with atomic(self.session):
            data["user_id"] = user_id
            campaign = await self.campaign_repo.create(data)

            await self.link_repo.add_lists(campaign.id, list_ids)
            linked = await self._rebuild_membership(user_id, campaign.id, list_ids)

            await self.activity_service.record(
                user_id=user_id,
                title=Activities.CAMPAIGN_CREATED,
                description=f'"{campaign.name}" targeting {len(list_ids)} customer list(s)'
            )

        logger.info(
            f"Campaign {campaign.id} created for user {user_id}: "
            f"{len(list_ids)} list(s), {linked} customer(s)"
        )
        return campaign

    async def retarget_campaign(
        self,
        user_id: uuid.UUID,
        campaign_id: uuid.UUID,
        campaign_data: CampaignUpdate
    ) -> Campaign:
        """
        Update a campaign and, when customer_list_ids is given, replace its
        targeting and recompute its customer links from the new lists.

        Replacement is a full clear-and-reinsert, not a diff. Everything runs
        in one transaction; on failure the previous links are untouched.
        """
        campaign = await self.campaign_repo.get(campaign_id, user_id)
        if not campaign:
            raise NotFoundError("Campaign", str(campaign_id))

        update_data = partial_update(campaign_data, required=CAMPAIGN_REQUIRED_FIELDS)
        new_list_ids = update_data.pop("customer_list_ids", None)

        list_ids = None
        if new_list_ids is not None:
            target_lists = await self.resolve_target_lists(user_id, new_list_ids)
            list_ids = [customer_list.id for customer_list in target_lists]

        async with atomic(self.session):
            campaign = await self.campaign_repo.update(campaign, update_data)

            if list_ids is not None:
                await self.link_repo.clear_lists(campaign.id)
                await self.link_repo.add_lists(campaign.id, list_ids)
                linked = await self._rebuild_membership(user_id, campaign.id, list_ids)
                logger.info(
                    f"Campaign {campaign.id} retargeted: "
                    f"{len(list_ids)} list(s), {linked} customer(s)"
                )

            await self.activity_service.record(
                user_id=user_id,
                title=Activities.CAMPAIGN_UPDATED,
                description=f'"{campaign.name}"'
            )

        return campaign

    async def extend_on_import(
        self,
        user_id: uuid.UUID,
        customer_list_id: uuid.UUID,
        customer_ids: Iterable[uuid.UUID]
    ) -> int:
        """
        Link freshly added customers of a list to every campaign targeting it.

        Runs in the caller's transaction. Existing (campaign, customer) pairs
        are skipped. Returns the number of links inserted.
        """
        customer_ids = list(customer_ids)
        if not customer_ids:
            return 0

        campaigns = await self.campaign_repo.get_targeting_list(user_id, customer_list_id)
        linked = 0
        for campaign in campaigns:
            linked += await self.link_repo.add_customers(campaign.id, customer_ids)

        if campaigns:
            logger.debug(
                f"Extended {len(campaigns)} campaign(s) targeting list {customer_list_id} "
                f"with {linked} link(s)"
            )
        return linked

    async def sync_customer(self, user_id: uuid.UUID, customer: Customer) -> int:
        """
        Re-derive one customer's campaign links from its current list.

        Used after the customer moved to another list. Runs in the caller's
        transaction.
        """
        await self.link_repo.unlink_customer(customer.id)
        return await self.extend_on_import(user_id, customer.customer_list_id, [customer.id])

    async def _rebuild_membership(
        self,
        user_id: uuid.UUID,
        campaign_id: uuid.UUID,
        customer_list_ids: List[uuid.UUID]
    ) -> int:
        """Replace a campaign's customer links with the union of its lists."""
        await self.link_repo.clear_customers(campaign_id)
        customer_ids = await self.customer_repo.get_ids_in_lists(user_id, customer_list_ids)
        return await self.link_repo.add_customers(campaign_id, customer_ids)
