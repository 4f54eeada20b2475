import uuid

import pytest
from sqlalchemy.exc import OperationalError

from crm_backend.core.exceptions import NotFoundError, ValidationError, InternalError
from crm_backend.models import Campaign, CampaignStatus, CampaignCustomerList, CampaignCustomer
from crm_backend.models.activity import Activities
from crm_backend.repositories.activity_repo import ActivityRepository
from crm_backend.repositories import campaign_link_repo
from crm_backend.repositories.campaign_link_repo import CampaignLinkRepository
from crm_backend.repositories.customer_repo import CustomerRepository
from crm_backend.schemas.campaign import CampaignCreate, CampaignUpdate
from crm_backend.schemas.customer import CustomerUpdate
from crm_backend.services.campaign_service import CampaignService
from crm_backend.services.csv_import_service import CsvImportService
from crm_backend.services.customer_list_service import CustomerListService
from crm_backend.services.customer_service import CustomerService
from crm_backend.services.propagation_service import CampaignPropagationService
from sqlmodel import select


async def linked_customer_ids(session, campaign_id):
    return set(await CampaignLinkRepository(session).get_customer_ids(campaign_id))


async def target_list_ids(session, campaign_id):
    return set(await CampaignLinkRepository(session).get_list_ids(campaign_id))


async def union_of_lists(session, owner_id, list_ids):
    return set(await CustomerRepository(session).get_ids_in_lists(owner_id, list_ids))


async def create_campaign(session, owner_id, list_ids, name="Spring", **fields):
    campaign = await CampaignService(session).create(
        owner_id, CampaignCreate(name=name, customer_list_ids=list_ids, **fields)
    )
    return campaign.id


@pytest.fixture
async def two_lists(owner_id, make_list, make_customer):
    list_a = await make_list(owner_id, "List A")
    list_b = await make_list(owner_id, "List B")
    alice = await make_customer(owner_id, list_a, "Alice")
    bob = await make_customer(owner_id, list_a, "Bob")
    carol = await make_customer(owner_id, list_b, "Carol")
    return {"list_a": list_a, "list_b": list_b, "alice": alice, "bob": bob, "carol": carol}


async def test_spring_campaign_scenario(session, owner_id, two_lists):
    campaign_id = await create_campaign(session, owner_id, [two_lists["list_a"]])
    assert await linked_customer_ids(session, campaign_id) == {two_lists["alice"], two_lists["bob"]}

    await CampaignService(session).update(
        owner_id,
        campaign_id,
        CampaignUpdate(customer_list_ids=[two_lists["list_a"], two_lists["list_b"]])
    )
    assert await linked_customer_ids(session, campaign_id) == {
        two_lists["alice"], two_lists["bob"], two_lists["carol"]
    }

    result = await CsvImportService(session).import_csv(
        owner_id, two_lists["list_b"], b"name,email\nDave,dave@example.com\n"
    )
    assert result.imported_count == 1

    dave = (await CustomerRepository(session).get_by_field(owner_id, "email", "dave@example.com")).id
    assert await linked_customer_ids(session, campaign_id) == {
        two_lists["alice"], two_lists["bob"], two_lists["carol"], dave
    }


async def test_create_links_union_of_target_lists(session, owner_id, two_lists):
    list_ids = [two_lists["list_a"], two_lists["list_b"]]
    campaign_id = await create_campaign(session, owner_id, list_ids)

    assert await target_list_ids(session, campaign_id) == set(list_ids)
    assert await linked_customer_ids(session, campaign_id) == await union_of_lists(session, owner_id, list_ids)


async def test_create_defaults_to_inactive(session, owner_id, two_lists):
    campaign = await CampaignService(session).create(
        owner_id, CampaignCreate(name="Quiet", customer_list_ids=[two_lists["list_a"]])
    )
    assert campaign.status == CampaignStatus.INACTIVE


async def test_duplicate_target_ids_link_each_customer_once(session, owner_id, two_lists):
    list_a = two_lists["list_a"]
    campaign_id = await create_campaign(session, owner_id, [list_a, list_a])

    links = await CampaignLinkRepository(session).get_customer_ids(campaign_id)
    assert sorted(links) == sorted([two_lists["alice"], two_lists["bob"]])
    assert await CampaignLinkRepository(session).get_list_ids(campaign_id) == [list_a]


async def test_extension_skips_existing_pairs(session, owner_id, two_lists):
    campaign_id = await create_campaign(session, owner_id, [two_lists["list_a"]])
    propagation = CampaignPropagationService(session)

    inserted = await propagation.extend_on_import(owner_id, two_lists["list_a"], [two_lists["alice"]])
    await session.commit()

    assert inserted == 0
    links = await CampaignLinkRepository(session).get_customer_ids(campaign_id)
    assert len(links) == 2


async def test_create_rejects_other_users_list(session, owner_id, other_owner_id, make_list):
    mine = await make_list(owner_id, "Mine")
    theirs = await make_list(other_owner_id, "Theirs")

    with pytest.raises(NotFoundError) as exc_info:
        await create_campaign(session, owner_id, [mine, theirs])

    assert str(theirs) in exc_info.value.message
    result = await session.exec(select(Campaign).where(Campaign.user_id == owner_id))
    assert result.all() == []


async def test_create_reports_first_missing_list(session, owner_id, make_list):
    mine = await make_list(owner_id, "Mine")
    first_missing, second_missing = uuid.uuid4(), uuid.uuid4()

    with pytest.raises(NotFoundError) as exc_info:
        await create_campaign(session, owner_id, [mine, first_missing, second_missing])

    assert exc_info.value.resource_id == str(first_missing)


async def test_engine_rejects_empty_targeting(session, owner_id):
    with pytest.raises(ValidationError) as exc_info:
        await CampaignPropagationService(session).resolve_target_lists(owner_id, [])

    assert exc_info.value.errors[0]["field"] == "customer_list_ids"


async def test_retarget_replaces_lists_and_membership(session, owner_id, make_list, make_customer):
    l1 = await make_list(owner_id, "L1")
    l2 = await make_list(owner_id, "L2")
    l3 = await make_list(owner_id, "L3")
    await make_customer(owner_id, l1, "Uno")
    await make_customer(owner_id, l2, "Dos")
    await make_customer(owner_id, l3, "Tres")
    campaign_id = await create_campaign(session, owner_id, [l1, l2])

    await CampaignService(session).update(owner_id, campaign_id, CampaignUpdate(customer_list_ids=[l2, l3]))

    assert await target_list_ids(session, campaign_id) == {l2, l3}
    assert await linked_customer_ids(session, campaign_id) == await union_of_lists(session, owner_id, [l2, l3])


async def test_scalar_update_leaves_membership_untouched(session, owner_id, two_lists):
    campaign_id = await create_campaign(session, owner_id, [two_lists["list_a"]])
    before = await linked_customer_ids(session, campaign_id)

    campaign = await CampaignService(session).update(
        owner_id, campaign_id, CampaignUpdate(name="Renamed", status="active")
    )

    assert campaign.name == "Renamed"
    assert campaign.status == "active"
    assert campaign.description is None
    assert await linked_customer_ids(session, campaign_id) == before
    assert await target_list_ids(session, campaign_id) == {two_lists["list_a"]}


async def test_failed_retarget_keeps_previous_associations(session, owner_id, other_owner_id, two_lists, make_list):
    campaign_id = await create_campaign(session, owner_id, [two_lists["list_a"]])
    theirs = await make_list(other_owner_id, "Not yours")
    lists_before = await target_list_ids(session, campaign_id)
    customers_before = await linked_customer_ids(session, campaign_id)

    with pytest.raises(NotFoundError):
        await CampaignService(session).update(
            owner_id,
            campaign_id,
            CampaignUpdate(name="Hijack", customer_list_ids=[two_lists["list_b"], theirs])
        )

    assert await target_list_ids(session, campaign_id) == lists_before
    assert await linked_customer_ids(session, campaign_id) == customers_before
    campaign = await CampaignService(session).get(owner_id, campaign_id)
    assert campaign.name == "Spring"


async def test_storage_failure_mid_retarget_rolls_back(session, owner_id, two_lists, monkeypatch):
    campaign_id = await create_campaign(session, owner_id, [two_lists["list_a"]])
    customers_before = await linked_customer_ids(session, campaign_id)

    async def broken_add_customers(self, campaign_id, customer_ids):
        raise OperationalError("INSERT INTO campaign_customer", {}, Exception("disk I/O error"))

    monkeypatch.setattr(CampaignLinkRepository, "add_customers", broken_add_customers)

    with pytest.raises(InternalError):
        await CampaignService(session).update(
            owner_id,
            campaign_id,
            CampaignUpdate(customer_list_ids=[two_lists["list_b"]])
        )

    monkeypatch.undo()
    assert await target_list_ids(session, campaign_id) == {two_lists["list_a"]}
    assert await linked_customer_ids(session, campaign_id) == customers_before


async def test_storage_failure_during_create_leaves_nothing_behind(session, owner_id, two_lists, monkeypatch):
    async def broken_add_customers(self, campaign_id, customer_ids):
        raise OperationalError("INSERT INTO campaign_customer", {}, Exception("disk I/O error"))

    monkeypatch.setattr(CampaignLinkRepository, "add_customers", broken_add_customers)

    with pytest.raises(InternalError):
        await create_campaign(session, owner_id, [two_lists["list_a"], two_lists["list_b"]])

    monkeypatch.undo()
    assert (await session.exec(select(Campaign).where(Campaign.user_id == owner_id))).all() == []
    assert (await session.exec(select(CampaignCustomerList))).all() == []
    assert (await session.exec(select(CampaignCustomer))).all() == []
    titles = [activity.title for activity in await ActivityRepository(session).get_recent(owner_id)]
    assert Activities.CAMPAIGN_CREATED not in titles


async def test_retarget_other_users_campaign_is_not_found(session, owner_id, other_owner_id, two_lists):
    campaign_id = await create_campaign(session, owner_id, [two_lists["list_a"]])

    with pytest.raises(NotFoundError):
        await CampaignService(session).update(other_owner_id, campaign_id, CampaignUpdate(name="Mine now"))


async def test_new_customer_joins_targeting_campaigns(session, owner_id, two_lists, make_customer):
    campaign_id = await create_campaign(session, owner_id, [two_lists["list_b"]])

    erin = await make_customer(owner_id, two_lists["list_b"], "Erin")

    assert await linked_customer_ids(session, campaign_id) == {two_lists["carol"], erin}


async def test_reassigned_customer_follows_new_list(session, owner_id, two_lists):
    campaign_a = await create_campaign(session, owner_id, [two_lists["list_a"]], name="Only A")
    campaign_b = await create_campaign(session, owner_id, [two_lists["list_b"]], name="Only B")

    await CustomerService(session).update(
        owner_id, two_lists["alice"], CustomerUpdate(customer_list_id=two_lists["list_b"])
    )

    for campaign_id, list_id in ((campaign_a, two_lists["list_a"]), (campaign_b, two_lists["list_b"])):
        assert await linked_customer_ids(session, campaign_id) == await union_of_lists(session, owner_id, [list_id])
    assert two_lists["alice"] in await linked_customer_ids(session, campaign_b)


async def test_reassign_to_other_users_list_is_not_found(session, owner_id, other_owner_id, two_lists, make_list):
    theirs = await make_list(other_owner_id, "Foreign")

    with pytest.raises(NotFoundError):
        await CustomerService(session).update(
            owner_id, two_lists["alice"], CustomerUpdate(customer_list_id=theirs)
        )

    customer = await CustomerService(session).get(owner_id, two_lists["alice"])
    assert customer.customer_list_id == two_lists["list_a"]


async def test_deleting_list_cascades_but_keeps_campaign(session, owner_id, make_list, make_customer):
    doomed = await make_list(owner_id, "Doomed")
    for name in ("One", "Two", "Three"):
        await make_customer(owner_id, doomed, name)
    campaign_id = await create_campaign(session, owner_id, [doomed])
    assert len(await linked_customer_ids(session, campaign_id)) == 3

    await CustomerListService(session).delete(owner_id, doomed)

    assert await CustomerRepository(session).list_by_list(owner_id, doomed) == []
    assert await linked_customer_ids(session, campaign_id) == set()
    assert await target_list_ids(session, campaign_id) == set()
    campaign = await CampaignService(session).get(owner_id, campaign_id)
    assert campaign.id == campaign_id


async def test_deleting_customer_removes_its_links(session, owner_id, two_lists):
    campaign_id = await create_campaign(session, owner_id, [two_lists["list_a"]])

    await CustomerService(session).delete(owner_id, two_lists["bob"])

    assert await linked_customer_ids(session, campaign_id) == {two_lists["alice"]}


async def test_deleting_campaign_removes_junction_rows(session, owner_id, two_lists):
    campaign_id = await create_campaign(session, owner_id, [two_lists["list_a"]])

    await CampaignService(session).delete(owner_id, campaign_id)

    assert await linked_customer_ids(session, campaign_id) == set()
    assert await target_list_ids(session, campaign_id) == set()
    with pytest.raises(NotFoundError):
        await CampaignService(session).get(owner_id, campaign_id)
    customer = await CustomerService(session).get(owner_id, two_lists["alice"])
    assert customer.customer_list_id == two_lists["list_a"]


async def test_links_are_written_in_batches(session, owner_id, two_lists, monkeypatch):
    monkeypatch.setattr(campaign_link_repo, "LINK_BATCH_SIZE", 2)
    list_ids = [two_lists["list_a"], two_lists["list_b"]]

    campaign_id = await create_campaign(session, owner_id, list_ids)

    assert await target_list_ids(session, campaign_id) == set(list_ids)
    assert await linked_customer_ids(session, campaign_id) == await union_of_lists(session, owner_id, list_ids)
    customer_ids = [two_lists["carol"], two_lists["alice"], two_lists["carol"], two_lists["bob"]]
    assert await CampaignLinkRepository(session).add_customers(campaign_id, customer_ids) == 0
