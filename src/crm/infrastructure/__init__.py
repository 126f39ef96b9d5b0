"""Infrastructure layer: concrete implementations of application ports."""

from crm.infrastructure.memory_repository import (
    InMemoryContactRepository,
    InMemoryProjectRepository,
)
from crm.infrastructure.persistence.database import Database
from crm.infrastructure.persistence.sql_repository import (
    SqlContactRepository,
    SqlProjectRepository,
)

__all__ = [
    "Database",
    "InMemoryContactRepository",
    "InMemoryProjectRepository",
    "SqlContactRepository",
    "SqlProjectRepository",
]
