"""Application layer: use cases, ports, validation and DTOs. Depends only on domain."""

from crm.application.contacts import (
    CreateContact,
    DeleteContact,
    GetContact,
    ListContacts,
    PromoteContact,
    UpdateContact,
)
from crm.application.dto import (
    ContactList,
    FieldError,
    NewContact,
    NewProject,
    PageRequest,
    ProjectList,
    ProjectSaved,
    PromotionOffer,
    Validation,
)
from crm.application.errors import AppError, ErrorKind
from crm.application.ports import ContactRepository, ProjectRepository
from crm.application.projects import (
    CreateProject,
    DeleteProject,
    GetProject,
    ListProjects,
    ListProjectsByContact,
    UpdateProject,
)
from crm.application.promotion import (
    CheckPromotion,
    CreateProjectWithPromotion,
    UpdateProjectWithPromotion,
    promotion_applies,
)

__all__ = [
    "AppError",
    "CheckPromotion",
    "ContactList",
    "ContactRepository",
    "CreateContact",
    "CreateProject",
    "CreateProjectWithPromotion",
    "DeleteContact",
    "DeleteProject",
    "ErrorKind",
    "FieldError",
    "GetContact",
    "GetProject",
    "ListContacts",
    "ListProjects",
    "ListProjectsByContact",
    "NewContact",
    "NewProject",
    "PageRequest",
    "ProjectList",
    "ProjectRepository",
    "ProjectSaved",
    "PromoteContact",
    "PromotionOffer",
    "UpdateContact",
    "UpdateProject",
    "UpdateProjectWithPromotion",
    "Validation",
    "promotion_applies",
]
