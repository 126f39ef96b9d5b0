"""Contact use cases. One class per operation, each with a single execute()."""

import logging
from collections.abc import Mapping
from typing import Any

from crm.application.dto import ContactList, NewContact, PageRequest, page_and_count
from crm.application.errors import AppError, repository_errors
from crm.application.ports import ContactRepository
from crm.domain import Contact, ContactStatus

logger = logging.getLogger(__name__)


class CreateContact:
    """Create a contact unless one with the same email exists."""

    def __init__(self, repository: ContactRepository) -> None:
        self._repo = repository

    async def execute(self, data: NewContact) -> Contact:
        logger.debug("CreateContact.execute called with data=%s", data)

        with repository_errors(f"Error checking email {data.email}"):
            existing = await self._repo.find_by_email(data.email)
        if existing is not None:
            logger.info("CreateContact: email %s already taken by %s", data.email, existing.id)
            raise AppError.conflict(
                f"Unable to create contact. A contact with email {data.email} already exists."
            )

        status = data.status if data.status is not None else ContactStatus.PROSPECT
        with repository_errors("Error creating contact."):
            contact = await self._repo.create(
                NewContact(
                    name=data.name,
                    email=data.email,
                    phone=data.phone,
                    company=data.company,
                    notes=data.notes,
                    status=status,
                )
            )
        logger.info("CreateContact: new contact created with id=%s", contact.id)
        return contact


class GetContact:
    def __init__(self, repository: ContactRepository) -> None:
        self._repo = repository

    async def execute(self, contact_id: str) -> Contact:
        logger.debug("GetContact.execute called with id=%s", contact_id)
        with repository_errors(f"Error retrieving contact with ID {contact_id}"):
            contact = await self._repo.find_by_id(contact_id)
        if contact is None:
            logger.info("GetContact: no contact found for id=%s", contact_id)
            raise AppError.not_found(f"Contact with ID {contact_id} not found.")
        return contact


class UpdateContact:
    """Partial update; only the fields present in changes are written."""

    def __init__(self, repository: ContactRepository) -> None:
        self._repo = repository

    async def execute(self, contact_id: str, changes: Mapping[str, Any]) -> Contact:
        logger.debug("UpdateContact.execute called with id=%s changes=%s", contact_id, changes)
        with repository_errors(f"Error retrieving contact with ID {contact_id}"):
            existing = await self._repo.find_by_id(contact_id)
        if existing is None:
            logger.info("UpdateContact: no contact found for id=%s", contact_id)
            raise AppError.not_found(f"Contact with ID {contact_id} not found for update.")

        with repository_errors(f"Error updating contact with ID {contact_id}"):
            updated = await self._repo.update(contact_id, dict(changes))
        logger.info("UpdateContact: contact updated, id=%s", updated.id)
        return updated


class DeleteContact:
    """Delete a contact. Deleting twice fails the second time with NotFound."""

    def __init__(self, repository: ContactRepository) -> None:
        self._repo = repository

    async def execute(self, contact_id: str) -> None:
        logger.debug("DeleteContact.execute called with id=%s", contact_id)
        with repository_errors(f"Error retrieving contact with ID {contact_id}"):
            existing = await self._repo.find_by_id(contact_id)
        if existing is None:
            logger.info("DeleteContact: no contact found for id=%s", contact_id)
            raise AppError.not_found(
                f"Unable to delete contact. No contact found with ID {contact_id}."
            )

        with repository_errors(f"Error deleting contact with ID {contact_id}"):
            await self._repo.delete(contact_id)
        logger.info("DeleteContact: contact deleted, id=%s", contact_id)


class PromoteContact:
    """
    Turn a prospect into a client. Only PROSPECT contacts qualify; promoting
    a CLIENT is a BadRequest, not a no-op.
    """

    def __init__(self, repository: ContactRepository) -> None:
        self._repo = repository

    async def execute(self, contact_id: str) -> Contact:
        logger.debug("PromoteContact.execute called with id=%s", contact_id)
        with repository_errors(f"Error retrieving contact with ID {contact_id}"):
            contact = await self._repo.find_by_id(contact_id)
        if contact is None:
            logger.info("PromoteContact: no contact found for id=%s", contact_id)
            raise AppError.not_found(f"Contact with ID {contact_id} not found.")

        if not contact.is_prospect:
            logger.info(
                "PromoteContact: contact %s is not a prospect (status=%s)",
                contact_id,
                contact.status.value,
            )
            raise AppError.bad_request(
                f"Only prospects can be promoted. Current status: {contact.status.value}"
            )

        contact.promote_to_client()
        with repository_errors(f"Error promoting contact with ID {contact_id} to CLIENT"):
            promoted = await self._repo.update(contact_id, {"status": contact.status})
        logger.info("PromoteContact: contact %s promoted to CLIENT", contact_id)
        return promoted


class ListContacts:
    def __init__(self, repository: ContactRepository) -> None:
        self._repo = repository

    async def execute(self, page: int | None = None, limit: int | None = None) -> ContactList:
        logger.debug("ListContacts.execute called with page=%s limit=%s", page, limit)
        request = PageRequest.from_page(page, limit)

        with repository_errors("Error retrieving contacts."):
            data, total_count = await page_and_count(
                self._repo.find_many(request), self._repo.count()
            )
        logger.info("ListContacts: retrieved %d contacts, totalCount=%d", len(data), total_count)
        return ContactList(data=list(data), total_count=total_count)
