"""Input validation for contacts and projects."""

from datetime import date, datetime, timezone

import pytest

from crm.application import AppError, ErrorKind
from crm.application.schemas import (
    validate_contact_changes,
    validate_id,
    validate_new_contact,
    validate_new_project,
    validate_project_changes,
)
from crm.domain import ContactStatus, ProjectStatus

CONTACT_ID = "0b6f1a52-3c0e-4f8e-9d55-2f8a1f1f3c11"


def _messages(result) -> dict[str, str]:
    return {e.path: e.message for e in result.errors}


# --- Contacts ---


def test_new_contact_minimal() -> None:
    result = validate_new_contact({"name": "Jane Doe", "email": "jane@x.com"})
    assert result.ok
    assert result.value.name == "Jane Doe"
    assert result.value.status is None
    assert result.value.phone is None


def test_new_contact_full_and_trimmed() -> None:
    result = validate_new_contact(
        {
            "name": "  Jane Doe ",
            "email": "jane@x.com",
            "phone": "0612345678",
            "company": "   ",
            "notes": "Met at the fair",
            "status": "CLIENT",
        }
    )
    assert result.ok
    assert result.value.name == "Jane Doe"
    assert result.value.company is None
    assert result.value.status is ContactStatus.CLIENT


@pytest.mark.parametrize(
    "payload,path,message",
    [
        ({"name": "J", "email": "jane@x.com"}, "name", "A contact name is required."),
        ({"email": "jane@x.com"}, "name", "A contact name is required."),
        ({"name": "Jane", "email": "not-an-email"}, "email", "Invalid email address."),
        ({"name": "Jane"}, "email", "Invalid email address."),
        (
            {"name": "Jane", "email": "jane@x.com", "phone": "12345"},
            "phone",
            "Phone number must contain 10 digits.",
        ),
        (
            {"name": "Jane", "email": "jane@x.com", "phone": "06-1234-567"},
            "phone",
            "Phone number must contain 10 digits.",
        ),
        ({"name": "Jane", "email": "jane@x.com", "status": "VIP"}, "status", "Invalid status."),
    ],
)
def test_new_contact_rejections(payload, path, message) -> None:
    result = validate_new_contact(payload)
    assert not result.ok
    assert _messages(result)[path] == message


def test_new_contact_reports_every_failure() -> None:
    result = validate_new_contact({"name": "J", "email": "nope", "phone": "1"})
    assert set(_messages(result)) == {"name", "email", "phone"}


def test_contact_changes_only_returns_sent_fields() -> None:
    result = validate_contact_changes({"company": "Acme"})
    assert result.ok
    assert result.value == {"company": "Acme"}


def test_contact_changes_empty_body() -> None:
    result = validate_contact_changes({})
    assert result.ok
    assert result.value == {}


def test_contact_changes_clearing_optional_field() -> None:
    result = validate_contact_changes({"phone": ""})
    assert result.ok
    assert result.value == {"phone": None}


@pytest.mark.parametrize("field", ["name", "email", "status"])
def test_contact_changes_reject_null_required_fields(field) -> None:
    result = validate_contact_changes({field: None})
    assert not result.ok
    assert field in _messages(result)


# --- Projects ---


def test_new_project_minimal() -> None:
    result = validate_new_project({"title": "Site redesign", "contactId": CONTACT_ID})
    assert result.ok
    assert result.value.contact_id == CONTACT_ID
    assert result.value.status is ProjectStatus.PENDING
    assert result.value.due_date is None


def test_new_project_parses_due_date_as_utc() -> None:
    result = validate_new_project(
        {
            "title": "Site redesign",
            "contactId": CONTACT_ID,
            "dueDate": "2030-05-01T10:00:00Z",
            "amount": 1500,
            "status": "QUOTE_SENT",
        }
    )
    assert result.ok
    assert result.value.due_date == datetime(2030, 5, 1, 10, tzinfo=timezone.utc)
    assert result.value.amount == 1500.0
    assert result.value.status is ProjectStatus.QUOTE_SENT


@pytest.mark.parametrize(
    "extra,path,message",
    [
        ({"title": "  "}, "title", "A project title is required."),
        ({"amount": 0}, "amount", "The amount must be greater than zero."),
        ({"amount": -5.5}, "amount", "The amount must be greater than zero."),
        ({"amount": "100"}, "amount", "The amount must be a valid number."),
        ({"amount": True}, "amount", "The amount must be a valid number."),
        ({"dueDate": "next tuesday"}, "dueDate", "Invalid date format."),
        ({"status": "DONE"}, "status", "Invalid status."),
        ({"contactId": "abc"}, "contactId", "Invalid contact ID."),
    ],
)
def test_new_project_rejections(extra, path, message) -> None:
    payload = {"title": "Site redesign", "contactId": CONTACT_ID, **extra}
    result = validate_new_project(payload)
    assert not result.ok
    assert _messages(result)[path] == message


def test_new_project_missing_required_fields() -> None:
    result = validate_new_project({})
    messages = _messages(result)
    assert messages["title"] == "A project title is required."
    assert messages["contactId"] == "Invalid contact ID."


def test_lenient_mode_accepts_what_strict_refuses() -> None:
    payload = {
        "title": "Site redesign",
        "contactId": CONTACT_ID,
        "description": "x" * 1001,
        "dueDate": "2020-01-01",
        "status": "COMPLETED",
    }
    assert validate_new_project(payload).ok
    strict = validate_new_project(payload, strict=True, today=date(2025, 1, 1))
    messages = _messages(strict)
    assert "description" in messages
    assert messages["dueDate"] == "The due date cannot be in the past."


def test_strict_allows_due_today() -> None:
    result = validate_new_project(
        {"title": "Site redesign", "contactId": CONTACT_ID, "dueDate": "2025-01-01T23:00:00Z"},
        strict=True,
        today=date(2025, 1, 1),
    )
    assert result.ok


@pytest.mark.parametrize("status", ["COMPLETED", "CANCELLED"])
def test_strict_requires_due_date_once_closed(status) -> None:
    payload = {"title": "Site redesign", "contactId": CONTACT_ID, "status": status}
    assert validate_new_project(payload).ok
    result = validate_new_project(payload, strict=True)
    assert _messages(result) == {
        "dueDate": "A due date is required for completed or cancelled projects."
    }


def test_project_changes_partial() -> None:
    result = validate_project_changes({"status": "ACCEPTED", "amount": 99.5})
    assert result.ok
    assert result.value == {"status": ProjectStatus.ACCEPTED, "amount": 99.5}


def test_project_changes_ignore_contact_id() -> None:
    result = validate_project_changes({"contactId": CONTACT_ID, "title": "Renamed"})
    assert result.ok
    assert result.value == {"title": "Renamed"}


@pytest.mark.parametrize("field", ["title", "status"])
def test_project_changes_reject_null_required_fields(field) -> None:
    result = validate_project_changes({field: None})
    assert not result.ok
    assert field in _messages(result)


def test_project_changes_clear_due_date() -> None:
    result = validate_project_changes({"dueDate": None})
    assert result.ok
    assert result.value == {"due_date": None}


def test_strict_project_changes_closing_without_due_date() -> None:
    result = validate_project_changes({"status": "CANCELLED"}, strict=True)
    assert "dueDate" in _messages(result)


# --- Route ids ---


def test_validate_id_accepts_uuid() -> None:
    assert validate_id(CONTACT_ID) == CONTACT_ID


def test_validate_id_rejects_other_strings() -> None:
    with pytest.raises(AppError) as info:
        validate_id("42")
    assert info.value.kind is ErrorKind.BAD_REQUEST
    assert info.value.message == "Invalid ID: 42"
