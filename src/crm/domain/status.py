"""Status enums for contacts and projects, and the transitions between them."""

from enum import Enum


class ContactStatus(str, Enum):
    PROSPECT = "PROSPECT"
    CLIENT = "CLIENT"


class ProjectStatus(str, Enum):
    PENDING = "PENDING"
    QUOTE_SENT = "QUOTE_SENT"
    ACCEPTED = "ACCEPTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Statuses that mean the contact has committed to work.
ENGAGED_STATUSES = frozenset({ProjectStatus.ACCEPTED, ProjectStatus.IN_PROGRESS})
# Statuses that close a project.
CLOSED_STATUSES = frozenset({ProjectStatus.COMPLETED, ProjectStatus.CANCELLED})


def promoted(status: ContactStatus) -> ContactStatus:
    """Promotion is one-way: PROSPECT -> CLIENT."""
    match status:
        case ContactStatus.PROSPECT | ContactStatus.CLIENT:
            return ContactStatus.CLIENT


def started(status: ProjectStatus) -> ProjectStatus:
    """PENDING -> IN_PROGRESS; any other status is left as is."""
    match status:
        case ProjectStatus.PENDING:
            return ProjectStatus.IN_PROGRESS
        case (
            ProjectStatus.QUOTE_SENT
            | ProjectStatus.ACCEPTED
            | ProjectStatus.IN_PROGRESS
            | ProjectStatus.COMPLETED
            | ProjectStatus.CANCELLED
        ):
            return status


def completed(status: ProjectStatus) -> ProjectStatus:
    """IN_PROGRESS -> COMPLETED; any other status is left as is."""
    match status:
        case ProjectStatus.IN_PROGRESS:
            return ProjectStatus.COMPLETED
        case (
            ProjectStatus.PENDING
            | ProjectStatus.QUOTE_SENT
            | ProjectStatus.ACCEPTED
            | ProjectStatus.COMPLETED
            | ProjectStatus.CANCELLED
        ):
            return status


def cancelled(status: ProjectStatus) -> ProjectStatus:
    """PENDING or IN_PROGRESS -> CANCELLED; any other status is left as is."""
    match status:
        case ProjectStatus.PENDING | ProjectStatus.IN_PROGRESS:
            return ProjectStatus.CANCELLED
        case (
            ProjectStatus.QUOTE_SENT
            | ProjectStatus.ACCEPTED
            | ProjectStatus.COMPLETED
            | ProjectStatus.CANCELLED
        ):
            return status
