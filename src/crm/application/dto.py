"""Data passed between the boundary, the use cases and the repositories."""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar

from crm.domain import Contact, ContactStatus, Project, ProjectStatus

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class FieldError:
    """One validation failure: dotted field path (camelCase) and message."""

    path: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


@dataclass(frozen=True)
class Validation(Generic[T]):
    """Outcome of a schema check: either a value or a list of errors."""

    value: T | None = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class NewContact:
    name: str
    email: str
    phone: str | None = None
    company: str | None = None
    notes: str | None = None
    # None means "not given"; CreateContact defaults it to PROSPECT.
    status: ContactStatus | None = None


@dataclass(frozen=True)
class NewProject:
    title: str
    contact_id: str
    description: str | None = None
    amount: float | None = None
    due_date: datetime | None = None
    status: ProjectStatus = ProjectStatus.PENDING


@dataclass(frozen=True)
class PageRequest:
    skip: int = 0
    take: int = DEFAULT_LIMIT

    @classmethod
    def from_page(cls, page: int | None = None, limit: int | None = None) -> "PageRequest":
        """Normalize 1-based page/limit; anything below 1 becomes 1."""
        page = max(1, DEFAULT_PAGE if page is None else page)
        limit = max(1, DEFAULT_LIMIT if limit is None else limit)
        return cls(skip=(page - 1) * limit, take=limit)


@dataclass(frozen=True)
class ContactList:
    data: list[Contact]
    total_count: int

    def to_dto(self) -> dict:
        return {"data": [c.to_dto() for c in self.data], "totalCount": self.total_count}


@dataclass(frozen=True)
class ProjectList:
    data: list[Project]
    total_count: int

    def to_dto(self) -> dict:
        return {"data": [p.to_dto() for p in self.data], "totalCount": self.total_count}


@dataclass(frozen=True)
class PromotionOffer:
    """Whether saving a project with project_status should offer to promote its contact."""

    contact_id: str
    contact_status: ContactStatus
    project_status: ProjectStatus
    offer: bool

    def to_dto(self) -> dict:
        return {
            "contactId": self.contact_id,
            "contactStatus": self.contact_status.value,
            "projectStatus": self.project_status.value,
            "offerPromotion": self.offer,
        }


@dataclass(frozen=True)
class ProjectSaved:
    """Result of the promote-then-save commands."""

    project: Project
    promoted_contact: Contact | None = None


async def page_and_count(
    items: Awaitable[list[T]], total: Awaitable[int]
) -> tuple[list[T], int]:
    """Read a page and its total concurrently. If either read fails the other is cancelled."""
    async with asyncio.TaskGroup() as group:
        items_task = group.create_task(items)
        total_task = group.create_task(total)
    return list(items_task.result()), total_task.result()
