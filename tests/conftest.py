"""Shared fixtures: in-memory repositories and a call-recording wrapper."""

from datetime import datetime, timedelta

import pytest

from crm.application import NewContact, NewProject
from crm.domain import ContactStatus, ProjectStatus, utcnow
from crm.infrastructure import InMemoryContactRepository, InMemoryProjectRepository


class Recorder:
    """Wraps a repository, records method calls, optionally fails some of them."""

    def __init__(self, inner, fail_on: tuple[str, ...] = ()) -> None:
        self._inner = inner
        self._fail_on = set(fail_on)
        self.calls: list[str] = []

    def __getattr__(self, name):
        target = getattr(self._inner, name)

        async def call(*args, **kwargs):
            self.calls.append(name)
            if name in self._fail_on:
                raise RuntimeError(f"storage failure in {name}")
            return await target(*args, **kwargs)

        return call


@pytest.fixture
def contacts() -> InMemoryContactRepository:
    return InMemoryContactRepository()


@pytest.fixture
def projects(contacts) -> InMemoryProjectRepository:
    return InMemoryProjectRepository(contacts)


def new_contact(
    name: str = "Jane Doe",
    email: str = "jane@x.com",
    status: ContactStatus | None = None,
) -> NewContact:
    return NewContact(name=name, email=email, status=status)


def new_project(
    contact_id: str,
    title: str = "Site redesign",
    status: ProjectStatus = ProjectStatus.PENDING,
    due_date: datetime | None = None,
) -> NewProject:
    return NewProject(title=title, contact_id=contact_id, status=status, due_date=due_date)


def in_days(days: int) -> datetime:
    return utcnow() + timedelta(days=days)
