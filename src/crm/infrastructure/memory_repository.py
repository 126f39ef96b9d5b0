"""In-memory implementations of the repository ports (no DB)."""

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from crm.application.dto import NewContact, NewProject, PageRequest
from crm.domain import Contact, ContactStatus, Project, new_id, utcnow
from crm.domain.entities import UNKNOWN_CONTACT_NAME


def _page(items: list, page: PageRequest) -> list:
    return items[page.skip : page.skip + page.take]


class InMemoryContactRepository:
    """Stores contacts in memory. Order preserved by insertion.
    Emails are unique, like the UNIQUE index of the SQL schema.
    """

    def __init__(self) -> None:
        self._by_id: dict[str, Contact] = {}

    async def create(self, data: NewContact) -> Contact:
        if any(c.email == data.email for c in self._by_id.values()):
            raise ValueError(f"Duplicate email {data.email!r}.")
        contact = Contact(
            id=new_id(),
            name=data.name,
            email=data.email,
            phone=data.phone,
            company=data.company,
            notes=data.notes,
            status=data.status or ContactStatus.PROSPECT,
            created_at=utcnow(),
        )
        self._by_id[contact.id] = contact
        return replace(contact)

    async def find_by_id(self, contact_id: str) -> Contact | None:
        contact = self._by_id.get(contact_id)
        return replace(contact) if contact is not None else None

    async def find_by_email(self, email: str) -> Contact | None:
        for contact in self._by_id.values():
            if contact.email == email:
                return replace(contact)
        return None

    async def find_many(self, page: PageRequest) -> list[Contact]:
        return [replace(c) for c in _page(list(self._by_id.values()), page)]

    async def update(self, contact_id: str, changes: Mapping[str, Any]) -> Contact:
        contact = self._by_id.get(contact_id)
        if contact is None:
            raise LookupError(f"No contact with id {contact_id!r}.")
        email = changes.get("email")
        if email is not None and any(
            c.email == email and c.id != contact_id for c in self._by_id.values()
        ):
            raise ValueError(f"Duplicate email {email!r}.")
        contact.apply(changes)
        return replace(contact)

    async def delete(self, contact_id: str) -> None:
        if self._by_id.pop(contact_id, None) is None:
            raise LookupError(f"No contact with id {contact_id!r}.")

    async def count(self) -> int:
        return len(self._by_id)

    def name_of(self, contact_id: str) -> str | None:
        contact = self._by_id.get(contact_id)
        return contact.name if contact is not None else None


class InMemoryProjectRepository:
    """Stores projects in memory. Order preserved by insertion.
    When given the contact store, it checks the owning contact exists on create
    (foreign key) and fills contact_name on every read.
    """

    def __init__(self, contacts: InMemoryContactRepository | None = None) -> None:
        self._contacts = contacts
        self._by_id: dict[str, Project] = {}

    def _with_contact_name(self, project: Project) -> Project:
        name = None
        if self._contacts is not None:
            name = self._contacts.name_of(project.contact_id)
        return replace(project, contact_name=name or UNKNOWN_CONTACT_NAME)

    async def create(self, data: NewProject) -> Project:
        if self._contacts is not None and self._contacts.name_of(data.contact_id) is None:
            raise LookupError(f"No contact with id {data.contact_id!r}.")
        project = Project(
            id=new_id(),
            title=data.title,
            contact_id=data.contact_id,
            description=data.description,
            amount=data.amount,
            due_date=data.due_date,
            status=data.status,
            created_at=utcnow(),
        )
        self._by_id[project.id] = project
        return self._with_contact_name(project)

    async def find_by_id(self, project_id: str) -> Project | None:
        project = self._by_id.get(project_id)
        return self._with_contact_name(project) if project is not None else None

    async def find_many(self, page: PageRequest) -> list[Project]:
        return [self._with_contact_name(p) for p in _page(list(self._by_id.values()), page)]

    async def find_by_contact_id(self, contact_id: str, page: PageRequest) -> list[Project]:
        owned = [p for p in self._by_id.values() if p.contact_id == contact_id]
        return [self._with_contact_name(p) for p in _page(owned, page)]

    async def update(self, project_id: str, changes: Mapping[str, Any]) -> Project:
        project = self._by_id.get(project_id)
        if project is None:
            raise LookupError(f"No project with id {project_id!r}.")
        project.apply(changes)
        return self._with_contact_name(project)

    async def delete(self, project_id: str) -> None:
        if self._by_id.pop(project_id, None) is None:
            raise LookupError(f"No project with id {project_id!r}.")

    async def count(self) -> int:
        return len(self._by_id)

    async def count_by_contact_id(self, contact_id: str) -> int:
        return sum(1 for p in self._by_id.values() if p.contact_id == contact_id)
