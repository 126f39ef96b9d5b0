"""Domain layer: entities and status rules. No dependencies on outer layers."""

from crm.domain.entities import Contact, Project, new_id, utcnow
from crm.domain.status import ContactStatus, ProjectStatus

__all__ = [
    "Contact",
    "ContactStatus",
    "Project",
    "ProjectStatus",
    "new_id",
    "utcnow",
]
