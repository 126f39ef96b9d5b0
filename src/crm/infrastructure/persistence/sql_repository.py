"""SQLAlchemy implementations of the repository ports.

Every method opens its own session, so a use case may await two reads
concurrently (page + count) without sharing a connection.
"""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, func, select

from crm.application.dto import NewContact, NewProject, PageRequest
from crm.domain import Contact, ContactStatus, Project, new_id, utcnow
from crm.infrastructure.persistence.database import Database
from crm.infrastructure.persistence.models import ContactRecord, ProjectRecord


def _write_back(record: Any, entity: Any, fields: tuple[str, ...]) -> None:
    for name in fields:
        setattr(record, name, getattr(entity, name))


class SqlContactRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(self, data: NewContact) -> Contact:
        record = ContactRecord(
            id=new_id(),
            name=data.name,
            email=data.email,
            phone=data.phone,
            company=data.company,
            notes=data.notes,
            status=data.status or ContactStatus.PROSPECT,
            created_at=utcnow(),
        )
        async with self._db.session() as session:
            session.add(record)
            await session.flush()
            return Contact.from_record(record)

    async def find_by_id(self, contact_id: str) -> Contact | None:
        async with self._db.session() as session:
            record = await session.get(ContactRecord, contact_id)
            return Contact.from_record(record) if record is not None else None

    async def find_by_email(self, email: str) -> Contact | None:
        stmt = select(ContactRecord).where(ContactRecord.email == email).limit(1)
        async with self._db.session() as session:
            record = (await session.scalars(stmt)).first()
            return Contact.from_record(record) if record is not None else None

    async def find_many(self, page: PageRequest) -> list[Contact]:
        stmt = (
            select(ContactRecord)
            .order_by(ContactRecord.created_at, ContactRecord.id)
            .offset(page.skip)
            .limit(page.take)
        )
        async with self._db.session() as session:
            return [Contact.from_record(r) for r in await session.scalars(stmt)]

    async def update(self, contact_id: str, changes: Mapping[str, Any]) -> Contact:
        async with self._db.session() as session:
            record = await session.get(ContactRecord, contact_id)
            if record is None:
                raise LookupError(f"No contact with id {contact_id!r}.")
            contact = Contact.from_record(record)
            contact.apply(changes)
            _write_back(record, contact, tuple(changes))
            await session.flush()
            return Contact.from_record(record)

    async def delete(self, contact_id: str) -> None:
        async with self._db.session() as session:
            result = await session.execute(
                delete(ContactRecord).where(ContactRecord.id == contact_id)
            )
            if result.rowcount == 0:
                raise LookupError(f"No contact with id {contact_id!r}.")

    async def count(self) -> int:
        async with self._db.session() as session:
            return await session.scalar(select(func.count()).select_from(ContactRecord))


class SqlProjectRepository:
    """Projects are loaded with their contact joined, for contact_name."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(self, data: NewProject) -> Project:
        record = ProjectRecord(
            id=new_id(),
            title=data.title,
            description=data.description,
            amount=data.amount,
            due_date=data.due_date,
            status=data.status,
            contact_id=data.contact_id,
            created_at=utcnow(),
        )
        async with self._db.session() as session:
            session.add(record)
            await session.flush()
            await session.refresh(record, attribute_names=["contact"])
            return Project.from_record(record)

    async def find_by_id(self, project_id: str) -> Project | None:
        async with self._db.session() as session:
            record = await session.get(ProjectRecord, project_id)
            return Project.from_record(record) if record is not None else None

    async def find_many(self, page: PageRequest) -> list[Project]:
        stmt = (
            select(ProjectRecord)
            .order_by(ProjectRecord.created_at, ProjectRecord.id)
            .offset(page.skip)
            .limit(page.take)
        )
        async with self._db.session() as session:
            return [Project.from_record(r) for r in await session.scalars(stmt)]

    async def find_by_contact_id(self, contact_id: str, page: PageRequest) -> list[Project]:
        stmt = (
            select(ProjectRecord)
            .where(ProjectRecord.contact_id == contact_id)
            .order_by(ProjectRecord.created_at, ProjectRecord.id)
            .offset(page.skip)
            .limit(page.take)
        )
        async with self._db.session() as session:
            return [Project.from_record(r) for r in await session.scalars(stmt)]

    async def update(self, project_id: str, changes: Mapping[str, Any]) -> Project:
        async with self._db.session() as session:
            record = await session.get(ProjectRecord, project_id)
            if record is None:
                raise LookupError(f"No project with id {project_id!r}.")
            project = Project.from_record(record)
            project.apply(changes)
            _write_back(record, project, tuple(changes))
            await session.flush()
            return Project.from_record(record)

    async def delete(self, project_id: str) -> None:
        async with self._db.session() as session:
            result = await session.execute(
                delete(ProjectRecord).where(ProjectRecord.id == project_id)
            )
            if result.rowcount == 0:
                raise LookupError(f"No project with id {project_id!r}.")

    async def count(self) -> int:
        async with self._db.session() as session:
            return await session.scalar(select(func.count()).select_from(ProjectRecord))

    async def count_by_contact_id(self, contact_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(ProjectRecord)
            .where(ProjectRecord.contact_id == contact_id)
        )
        async with self._db.session() as session:
            return await session.scalar(stmt)
