"""Domain entities: Contact and Project."""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from crm.domain.status import (
    ContactStatus,
    ProjectStatus,
    cancelled,
    completed,
    promoted,
    started,
)

UNKNOWN_CONTACT_NAME = "Unknown Contact"


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return as_utc(value).isoformat().replace("+00:00", "Z")


@dataclass
class Contact:
    """
    A prospect or client. Email is unique across contacts (enforced by the
    use cases and the storage layer, not here).
    """

    UPDATABLE_FIELDS = ("name", "email", "phone", "company", "notes", "status")

    name: str
    email: str
    id: str = field(default_factory=new_id)
    phone: str | None = None
    company: str | None = None
    notes: str | None = None
    status: ContactStatus = ContactStatus.PROSPECT
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Contact name must be non-empty.")
        self.status = ContactStatus(self.status)
        self.created_at = as_utc(self.created_at)

    @classmethod
    def from_record(cls, record: Any) -> "Contact":
        """Build from a persisted row (any object with matching attributes)."""
        return cls(
            id=record.id,
            name=record.name,
            email=record.email,
            phone=record.phone or None,
            company=record.company or None,
            notes=record.notes or None,
            status=record.status,
            created_at=record.created_at,
        )

    def to_dto(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "company": self.company,
            "notes": self.notes,
            "status": self.status.value,
            "createdAt": _iso(self.created_at),
        }

    def apply(self, changes: Mapping[str, Any]) -> None:
        """Apply a partial update. Unknown keys raise KeyError."""
        for key in changes:
            if key not in self.UPDATABLE_FIELDS:
                raise KeyError(f"Contact field {key!r} cannot be updated.")
        updated = replace(self, **changes)
        self.__dict__.update(updated.__dict__)

    @property
    def is_prospect(self) -> bool:
        return self.status is ContactStatus.PROSPECT

    def promote_to_client(self) -> None:
        self.status = promoted(self.status)


@dataclass
class Project:
    """
    A piece of work owned by a contact. contact_name is read-time display
    data taken from the joined contact; it is never written back.
    """

    UPDATABLE_FIELDS = ("title", "description", "amount", "due_date", "status")

    title: str
    contact_id: str
    id: str = field(default_factory=new_id)
    description: str | None = None
    amount: float | None = None
    due_date: datetime | None = None
    status: ProjectStatus = ProjectStatus.PENDING
    created_at: datetime = field(default_factory=utcnow)
    contact_name: str = UNKNOWN_CONTACT_NAME

    def __post_init__(self):
        if not self.title or not self.title.strip():
            raise ValueError("Project title must be non-empty.")
        if not self.contact_id:
            raise ValueError("Project must belong to a contact.")
        self.status = ProjectStatus(self.status)
        self.created_at = as_utc(self.created_at)
        if self.due_date is not None:
            self.due_date = as_utc(self.due_date)

    @classmethod
    def from_record(cls, record: Any) -> "Project":
        contact = getattr(record, "contact", None)
        contact_name = getattr(contact, "name", None) or UNKNOWN_CONTACT_NAME
        return cls(
            id=record.id,
            title=record.title,
            description=record.description or None,
            amount=record.amount,
            due_date=record.due_date,
            status=record.status,
            contact_id=record.contact_id,
            created_at=record.created_at,
            contact_name=contact_name,
        )

    def to_dto(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "amount": self.amount,
            "dueDate": _iso(self.due_date),
            "status": self.status.value,
            "contactId": self.contact_id,
            "createdAt": _iso(self.created_at),
            "contactName": self.contact_name,
        }

    def apply(self, changes: Mapping[str, Any]) -> None:
        """Apply a partial update. The owning contact cannot be changed."""
        for key in changes:
            if key not in self.UPDATABLE_FIELDS:
                raise KeyError(f"Project field {key!r} cannot be updated.")
        updated = replace(self, **changes)
        self.__dict__.update(updated.__dict__)

    def start(self) -> None:
        self.status = started(self.status)

    def complete(self) -> None:
        self.status = completed(self.status)

    def cancel(self) -> None:
        self.status = cancelled(self.status)
