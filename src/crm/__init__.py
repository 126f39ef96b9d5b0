"""
CRM core: clean-architecture layout.

- domain: entities (Contact, Project) and status rules. No outer dependencies.
- application: use cases, promotion workflow, validation, ports (repositories), DTOs.
- infrastructure: adapters (in-memory and SQLAlchemy repositories, Database handle).
"""

from crm.application import AppError, ContactRepository, ErrorKind, ProjectRepository
from crm.domain import Contact, ContactStatus, Project, ProjectStatus
from crm.infrastructure import (
    Database,
    InMemoryContactRepository,
    InMemoryProjectRepository,
    SqlContactRepository,
    SqlProjectRepository,
)

__all__ = [
    "AppError",
    "Contact",
    "ContactRepository",
    "ContactStatus",
    "Database",
    "ErrorKind",
    "InMemoryContactRepository",
    "InMemoryProjectRepository",
    "Project",
    "ProjectRepository",
    "ProjectStatus",
    "SqlContactRepository",
    "SqlProjectRepository",
]
