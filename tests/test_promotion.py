"""Promotion decision and the promote-then-save commands."""

import pytest
from conftest import Recorder, in_days, new_contact, new_project

from crm.application import (
    AppError,
    CheckPromotion,
    CreateContact,
    CreateProject,
    CreateProjectWithPromotion,
    ErrorKind,
    UpdateProjectWithPromotion,
    promotion_applies,
)
from crm.domain import ContactStatus, ProjectStatus


@pytest.mark.parametrize(
    "contact_status,project_status,expected",
    [
        (ContactStatus.PROSPECT, ProjectStatus.ACCEPTED, True),
        (ContactStatus.PROSPECT, ProjectStatus.IN_PROGRESS, True),
        (ContactStatus.PROSPECT, ProjectStatus.PENDING, False),
        (ContactStatus.PROSPECT, ProjectStatus.QUOTE_SENT, False),
        (ContactStatus.PROSPECT, ProjectStatus.COMPLETED, False),
        (ContactStatus.CLIENT, ProjectStatus.ACCEPTED, False),
        (ContactStatus.CLIENT, ProjectStatus.IN_PROGRESS, False),
    ],
)
def test_promotion_applies(contact_status, project_status, expected) -> None:
    assert promotion_applies(contact_status, project_status) is expected


@pytest.mark.asyncio
async def test_check_promotion_offer(contacts) -> None:
    contact = await CreateContact(contacts).execute(new_contact())
    offer = await CheckPromotion(contacts).execute(contact.id, ProjectStatus.ACCEPTED)
    assert offer.offer is True
    assert offer.to_dto() == {
        "contactId": contact.id,
        "contactStatus": "PROSPECT",
        "projectStatus": "ACCEPTED",
        "offerPromotion": True,
    }


@pytest.mark.asyncio
async def test_check_promotion_missing_contact(contacts) -> None:
    with pytest.raises(AppError) as info:
        await CheckPromotion(contacts).execute("missing-id", ProjectStatus.ACCEPTED)
    assert info.value.kind is ErrorKind.NOT_FOUND


@pytest.mark.asyncio
async def test_create_with_confirmed_promotion(contacts, projects) -> None:
    contact = await CreateContact(contacts).execute(new_contact())
    saved = await CreateProjectWithPromotion(contacts, projects).execute(
        new_project(contact.id, status=ProjectStatus.ACCEPTED), promote_contact=True
    )
    assert saved.promoted_contact is not None
    assert saved.promoted_contact.status is ContactStatus.CLIENT
    assert saved.project.status is ProjectStatus.ACCEPTED
    assert (await contacts.find_by_id(contact.id)).status is ContactStatus.CLIENT


@pytest.mark.asyncio
async def test_create_without_confirmation_never_promotes(contacts, projects) -> None:
    contact = await CreateContact(contacts).execute(new_contact())
    saved = await CreateProjectWithPromotion(contacts, projects).execute(
        new_project(contact.id, status=ProjectStatus.IN_PROGRESS)
    )
    assert saved.promoted_contact is None
    assert (await contacts.find_by_id(contact.id)).status is ContactStatus.PROSPECT


@pytest.mark.asyncio
async def test_confirmed_but_not_applicable_skips_promotion(contacts, projects) -> None:
    client = await CreateContact(contacts).execute(
        new_contact(email="client@x.com", status=ContactStatus.CLIENT)
    )
    saved = await CreateProjectWithPromotion(contacts, projects).execute(
        new_project(client.id, status=ProjectStatus.ACCEPTED), promote_contact=True
    )
    assert saved.promoted_contact is None
    assert saved.project.contact_id == client.id

    prospect = await CreateContact(contacts).execute(new_contact())
    saved = await CreateProjectWithPromotion(contacts, projects).execute(
        new_project(prospect.id, status=ProjectStatus.PENDING), promote_contact=True
    )
    assert saved.promoted_contact is None
    assert (await contacts.find_by_id(prospect.id)).status is ContactStatus.PROSPECT


@pytest.mark.asyncio
async def test_promotion_runs_before_project_write(contacts, projects) -> None:
    contact = await CreateContact(contacts).execute(new_contact())
    project_recorder = Recorder(projects, fail_on=("create",))
    with pytest.raises(AppError) as info:
        await CreateProjectWithPromotion(contacts, project_recorder).execute(
            new_project(contact.id, status=ProjectStatus.ACCEPTED), promote_contact=True
        )
    assert info.value.kind is ErrorKind.INTERNAL
    # No transaction spans both steps.
    assert (await contacts.find_by_id(contact.id)).status is ContactStatus.CLIENT


@pytest.mark.asyncio
async def test_update_with_confirmed_promotion_uses_stored_contact(contacts, projects) -> None:
    contact = await CreateContact(contacts).execute(new_contact())
    project = await CreateProject(projects).execute(new_project(contact.id))

    saved = await UpdateProjectWithPromotion(contacts, projects).execute(
        project.id, {"status": ProjectStatus.IN_PROGRESS}, promote_contact=True
    )
    assert saved.project.status is ProjectStatus.IN_PROGRESS
    assert saved.promoted_contact is not None
    assert saved.promoted_contact.id == contact.id


@pytest.mark.asyncio
async def test_update_keeps_current_status_as_target(contacts, projects) -> None:
    contact = await CreateContact(contacts).execute(new_contact())
    project = await CreateProject(projects).execute(
        new_project(contact.id, status=ProjectStatus.ACCEPTED)
    )
    saved = await UpdateProjectWithPromotion(contacts, projects).execute(
        project.id, {"title": "Renamed"}, promote_contact=True
    )
    assert saved.promoted_contact is not None
    assert saved.project.title == "Renamed"


@pytest.mark.asyncio
async def test_update_missing_project_with_promotion(contacts, projects) -> None:
    with pytest.raises(AppError) as info:
        await UpdateProjectWithPromotion(contacts, projects).execute(
            "missing-id", {"status": ProjectStatus.ACCEPTED}, promote_contact=True
        )
    assert info.value.kind is ErrorKind.NOT_FOUND


@pytest.mark.asyncio
async def test_rejected_due_date_leaves_contact_a_prospect(contacts, projects) -> None:
    contact = await CreateContact(contacts).execute(new_contact())
    contact_recorder = Recorder(contacts)
    with pytest.raises(AppError) as info:
        await CreateProjectWithPromotion(contact_recorder, projects).execute(
            new_project(contact.id, status=ProjectStatus.ACCEPTED, due_date=in_days(-1)),
            promote_contact=True,
        )
    assert info.value.kind is ErrorKind.BAD_REQUEST
    assert "must be a future date" in info.value.message
    assert contact_recorder.calls == []
    assert (await contacts.find_by_id(contact.id)).status is ContactStatus.PROSPECT
    assert await projects.count() == 0
