"""Promote-then-save workflow for projects.

Moving a project to ACCEPTED or IN_PROGRESS while its contact is still a
prospect is the moment to offer turning that contact into a client. Whether
to offer is computed here from domain state; the caller only confirms.
The commands run two independent steps (promote, then create/update the
project). There is no transaction across them: if the second step fails the
promotion stays.
"""

import logging
from collections.abc import Mapping
from typing import Any

from crm.application.contacts import GetContact, PromoteContact
from crm.application.dto import NewProject, PromotionOffer, ProjectSaved
from crm.application.ports import ContactRepository, ProjectRepository
from crm.application.projects import Clock, CreateProject, GetProject, UpdateProject
from crm.domain import Contact, ContactStatus, ProjectStatus, utcnow
from crm.domain.status import ENGAGED_STATUSES

logger = logging.getLogger(__name__)


def promotion_applies(contact_status: ContactStatus, project_status: ProjectStatus) -> bool:
    """True when a prospect's project becomes ACCEPTED or IN_PROGRESS."""
    match contact_status:
        case ContactStatus.PROSPECT:
            return project_status in ENGAGED_STATUSES
        case ContactStatus.CLIENT:
            return False


class CheckPromotion:
    """Tell the caller whether to prompt for promotion before saving a project."""

    def __init__(self, contacts: ContactRepository) -> None:
        self._contacts = contacts

    async def execute(self, contact_id: str, project_status: ProjectStatus) -> PromotionOffer:
        contact = await GetContact(self._contacts).execute(contact_id)
        return PromotionOffer(
            contact_id=contact.id,
            contact_status=contact.status,
            project_status=project_status,
            offer=promotion_applies(contact.status, project_status),
        )


async def _promote_if_confirmed(
    contacts: ContactRepository,
    contact_id: str,
    project_status: ProjectStatus,
    confirmed: bool,
) -> Contact | None:
    if not confirmed:
        return None
    contact = await GetContact(contacts).execute(contact_id)
    if not promotion_applies(contact.status, project_status):
        logger.info(
            "Promotion confirmed but not applicable: contact %s is %s, project status %s",
            contact_id,
            contact.status.value,
            project_status.value,
        )
        return None
    return await PromoteContact(contacts).execute(contact_id)


class CreateProjectWithPromotion:
    def __init__(
        self,
        contacts: ContactRepository,
        projects: ProjectRepository,
        *,
        clock: Clock = utcnow,
    ) -> None:
        self._contacts = contacts
        self._projects = projects
        self._clock = clock

    async def execute(self, data: NewProject, *, promote_contact: bool = False) -> ProjectSaved:
        logger.debug(
            "CreateProjectWithPromotion.execute called with data=%s promote_contact=%s",
            data,
            promote_contact,
        )
        create = CreateProject(self._projects, clock=self._clock)
        # A request the project step would reject must not promote.
        create.check(data)
        promoted = await _promote_if_confirmed(
            self._contacts, data.contact_id, data.status, promote_contact
        )
        project = await create.execute(data)
        return ProjectSaved(project=project, promoted_contact=promoted)


class UpdateProjectWithPromotion:
    """The owning contact is the one on the stored project, never client input."""

    def __init__(self, contacts: ContactRepository, projects: ProjectRepository) -> None:
        self._contacts = contacts
        self._projects = projects

    async def execute(
        self,
        project_id: str,
        changes: Mapping[str, Any],
        *,
        promote_contact: bool = False,
    ) -> ProjectSaved:
        logger.debug(
            "UpdateProjectWithPromotion.execute called with id=%s changes=%s promote_contact=%s",
            project_id,
            changes,
            promote_contact,
        )
        promoted = None
        if promote_contact:
            current = await GetProject(self._projects).execute(project_id)
            target_status = changes.get("status") or current.status
            promoted = await _promote_if_confirmed(
                self._contacts, current.contact_id, target_status, True
            )
        project = await UpdateProject(self._projects).execute(project_id, changes)
        return ProjectSaved(project=project, promoted_contact=promoted)
