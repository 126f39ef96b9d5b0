"""Input validation for contacts and projects.

Each ``validate_*`` function takes the raw JSON-like mapping a client sent and
returns a ``Validation``: the normalized value on success, or a list of
``FieldError`` (camelCase path + message). They never raise; the caller
decides how to surface failures.

Project checks come in two strengths. The default matches what the API has
always accepted. ``strict=True`` additionally caps the description length,
refuses due dates before today and requires a due date once a project is
completed or cancelled.
"""

import math
import re
import uuid
from datetime import date, datetime
from typing import Any

from email_validator import EmailNotValidError, validate_email
from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from crm.application.dto import FieldError, NewContact, NewProject, Validation
from crm.application.errors import AppError
from crm.domain import ContactStatus, ProjectStatus, utcnow
from crm.domain.entities import as_utc
from crm.domain.status import CLOSED_STATUSES

PHONE_PATTERN = re.compile(r"[0-9]{10}")
NAME_MIN_LENGTH = 2
DESCRIPTION_MAX_LENGTH = 1000

_REQUIRED_MESSAGES = {
    "name": "A contact name is required.",
    "email": "Invalid email address.",
    "title": "A project title is required.",
    "status": "Invalid status.",
    "contact_id": "Invalid contact ID.",
}


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_enum(enum_cls, value: Any):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError("Invalid status.") from None


def _context(info: ValidationInfo) -> dict:
    return info.context or {}


class _Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# --- Contacts ---


class ContactCreateSchema(_Schema):
    name: str
    email: str
    phone: str | None = None
    company: str | None = None
    notes: str | None = None
    status: ContactStatus | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if len(value) < NAME_MIN_LENGTH:
            raise ValueError(_REQUIRED_MESSAGES["name"])
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            return validate_email(value.strip(), check_deliverability=False).normalized
        except EmailNotValidError:
            raise ValueError("Invalid email address.") from None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str | None) -> str | None:
        value = _blank_to_none(value)
        if value is not None and not PHONE_PATTERN.fullmatch(value):
            raise ValueError("Phone number must contain 10 digits.")
        return value

    @field_validator("company", "notes")
    @classmethod
    def strip_optional(cls, value: str | None) -> str | None:
        return _blank_to_none(value)

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, value: Any) -> ContactStatus | None:
        return _parse_enum(ContactStatus, value)


class ContactChangesSchema(ContactCreateSchema):
    name: str | None = None
    email: str | None = None

    @field_validator("name", "email", "status", mode="before")
    @classmethod
    def not_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            raise ValueError(_REQUIRED_MESSAGES[info.field_name])
        return value


# --- Projects ---


class _ProjectFields(_Schema):
    title: str
    description: str | None = None
    amount: float | None = None
    due_date: datetime | None = None
    status: ProjectStatus = ProjectStatus.PENDING

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError(_REQUIRED_MESSAGES["title"])
        return value

    @field_validator("description")
    @classmethod
    def check_description(cls, value: str | None, info: ValidationInfo) -> str | None:
        value = _blank_to_none(value)
        if (
            value is not None
            and _context(info).get("strict")
            and len(value) > DESCRIPTION_MAX_LENGTH
        ):
            raise ValueError(
                f"The description must be at most {DESCRIPTION_MAX_LENGTH} characters."
            )
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def check_amount(cls, value: Any) -> float | None:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("The amount must be a valid number.")
        if not math.isfinite(value):
            raise ValueError("The amount must be a valid number.")
        if value <= 0:
            raise ValueError("The amount must be greater than zero.")
        return float(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, value: Any) -> datetime | None:
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return as_utc(value)
        if not isinstance(value, str):
            raise ValueError("Invalid date format.")
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValueError("Invalid date format.") from None
        return as_utc(parsed)

    @field_validator("due_date")
    @classmethod
    def check_due_date(cls, value: datetime | None, info: ValidationInfo) -> datetime | None:
        context = _context(info)
        if value is not None and context.get("strict"):
            today = context.get("today") or utcnow().date()
            if value.date() < today:
                raise ValueError("The due date cannot be in the past.")
        return value

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, value: Any) -> ProjectStatus | None:
        return _parse_enum(ProjectStatus, value)


class ProjectCreateSchema(_ProjectFields):
    contact_id: str

    @field_validator("contact_id", mode="before")
    @classmethod
    def check_contact_id(cls, value: Any) -> str:
        if not isinstance(value, str) or not _is_uuid(value):
            raise ValueError(_REQUIRED_MESSAGES["contact_id"])
        return value


class ProjectChangesSchema(_ProjectFields):
    """Partial project update. The owning contact cannot be changed."""

    title: str | None = None
    status: ProjectStatus | None = None

    @field_validator("title", "status", mode="before")
    @classmethod
    def not_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            raise ValueError(_REQUIRED_MESSAGES[info.field_name])
        return value


# --- Public API ---


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return False
    return True


def _field_errors(exc: ValidationError) -> list[FieldError]:
    out = []
    for err in exc.errors():
        path = ".".join(str(part) for part in err["loc"])
        if err["type"] == "value_error":
            message = str(err["ctx"]["error"])
        elif err["type"] == "missing":
            field_name = err["loc"][-1] if err["loc"] else ""
            snake = re.sub(r"(?<!^)(?=[A-Z])", "_", str(field_name)).lower()
            message = _REQUIRED_MESSAGES.get(snake, "This field is required.")
        else:
            message = err["msg"]
        out.append(FieldError(path=path, message=message))
    return out


def _closed_without_due_date(status: ProjectStatus | None, due_date: datetime | None) -> list[FieldError]:
    if status in CLOSED_STATUSES and due_date is None:
        return [
            FieldError(
                path="dueDate",
                message="A due date is required for completed or cancelled projects.",
            )
        ]
    return []


def validate_new_contact(data: Any) -> Validation[NewContact]:
    try:
        model = ContactCreateSchema.model_validate(data)
    except ValidationError as exc:
        return Validation(errors=_field_errors(exc))
    return Validation(value=NewContact(**model.model_dump()))


def validate_contact_changes(data: Any) -> Validation[dict]:
    """Validate a partial update; only fields present in data are returned."""
    try:
        model = ContactChangesSchema.model_validate(data)
    except ValidationError as exc:
        return Validation(errors=_field_errors(exc))
    return Validation(value=model.model_dump(exclude_unset=True))


def validate_new_project(
    data: Any, *, strict: bool = False, today: date | None = None
) -> Validation[NewProject]:
    try:
        model = ProjectCreateSchema.model_validate(
            data, context={"strict": strict, "today": today}
        )
    except ValidationError as exc:
        return Validation(errors=_field_errors(exc))
    if strict:
        errors = _closed_without_due_date(model.status, model.due_date)
        if errors:
            return Validation(errors=errors)
    return Validation(value=NewProject(**model.model_dump()))


def validate_project_changes(
    data: Any, *, strict: bool = False, today: date | None = None
) -> Validation[dict]:
    try:
        model = ProjectChangesSchema.model_validate(
            data, context={"strict": strict, "today": today}
        )
    except ValidationError as exc:
        return Validation(errors=_field_errors(exc))
    changes = model.model_dump(exclude_unset=True)
    if strict and "status" in changes:
        errors = _closed_without_due_date(changes["status"], changes.get("due_date"))
        if errors:
            return Validation(errors=errors)
    return Validation(value=changes)


def validate_id(value: str) -> str:
    """Reject route ids that are not UUIDs before any use case runs."""
    if not _is_uuid(value):
        raise AppError.bad_request(f"Invalid ID: {value}")
    return value
