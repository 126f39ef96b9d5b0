"""Application ports (interfaces). Implemented by infrastructure adapters."""

from collections.abc import Mapping
from typing import Any, Protocol

from crm.application.dto import NewContact, NewProject, PageRequest
from crm.domain import Contact, Project


class ContactRepository(Protocol):
    """Persists and queries contacts."""

    async def create(self, data: NewContact) -> Contact:
        """Store a new contact; the repository assigns id and created_at."""
        ...

    async def find_by_id(self, contact_id: str) -> Contact | None:
        ...

    async def find_by_email(self, email: str) -> Contact | None:
        ...

    async def find_many(self, page: PageRequest) -> list[Contact]:
        """Return one page of contacts in creation order."""
        ...

    async def update(self, contact_id: str, changes: Mapping[str, Any]) -> Contact:
        """Apply a partial update and return the stored contact."""
        ...

    async def delete(self, contact_id: str) -> None:
        ...

    async def count(self) -> int:
        ...


class ProjectRepository(Protocol):
    """Persists and queries projects. Returned projects carry contact_name."""

    async def create(self, data: NewProject) -> Project:
        """Store a new project. Fails if contact_id references no contact."""
        ...

    async def find_by_id(self, project_id: str) -> Project | None:
        ...

    async def find_many(self, page: PageRequest) -> list[Project]:
        ...

    async def find_by_contact_id(self, contact_id: str, page: PageRequest) -> list[Project]:
        ...

    async def update(self, project_id: str, changes: Mapping[str, Any]) -> Project:
        ...

    async def delete(self, project_id: str) -> None:
        ...

    async def count(self) -> int:
        ...

    async def count_by_contact_id(self, contact_id: str) -> int:
        ...
