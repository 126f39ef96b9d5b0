"""
FastAPI backend: REST API for contacts and projects.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging

from crm.config import Settings, load_env_file

# Load .env from repo root (when run from repo root or from Docker)
load_env_file()

from contextlib import asynccontextmanager
from typing import Any

from fastapi import Body, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from crm.application import (
    AppError,
    CheckPromotion,
    ContactRepository,
    CreateContact,
    CreateProjectWithPromotion,
    DeleteContact,
    DeleteProject,
    GetContact,
    GetProject,
    ListContacts,
    ListProjects,
    ListProjectsByContact,
    ProjectRepository,
    PromoteContact,
    UpdateContact,
    UpdateProjectWithPromotion,
    Validation,
)
from crm.application.schemas import (
    validate_contact_changes,
    validate_id,
    validate_new_contact,
    validate_new_project,
    validate_project_changes,
)
from crm.domain import ProjectStatus
from crm.infrastructure import Database, SqlContactRepository, SqlProjectRepository

_settings = Settings.from_env()

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=_settings.log_level,
)
logger = logging.getLogger(__name__)


def _contacts(request: Request) -> ContactRepository:
    return request.app.state.contacts


def _projects(request: Request) -> ProjectRepository:
    return request.app.state.projects


def _strict(request: Request) -> bool:
    return request.app.state.settings.strict_project_validation


def _require_valid(result: Validation, message: str):
    if not result.ok:
        logger.info("%s: %s", message, [e.to_dict() for e in result.errors])
        raise AppError.bad_request(message, errors=result.errors)
    return result.value


def _promote_flag(body: dict[str, Any]) -> bool:
    flag = body.pop("promoteContact", False)
    if flag is None:
        return False
    if not isinstance(flag, bool):
        raise AppError.bad_request("promoteContact must be a boolean.")
    return flag


# --- Error rendering ---


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    content: dict[str, Any] = {"message": exc.message}
    if exc.errors:
        content["errors"] = [e.to_dict() for e in exc.errors]
    return JSONResponse(content=content, status_code=exc.status_code)


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"path": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    logger.info("%s %s rejected: %s", request.method, request.url.path, errors)
    return JSONResponse(
        content={"message": "Invalid request parameters", "errors": errors},
        status_code=400,
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s failed", request.method, request.url.path)
    return JSONResponse(content={"message": "Internal server error"}, status_code=500)


# --- App factory ---


def create_app(
    settings: Settings | None = None,
    *,
    contacts: ContactRepository | None = None,
    projects: ProjectRepository | None = None,
) -> FastAPI:
    """Build the app. With injected repositories no database is opened."""
    settings = settings or _settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        db: Database | None = None
        try:
            if contacts is not None and projects is not None:
                app.state.contacts = contacts
                app.state.projects = projects
            else:
                db = Database(settings.database_url, echo=settings.db_echo)
                db.open()
                if settings.create_schema:
                    await db.create_schema()
                app.state.contacts = SqlContactRepository(db)
                app.state.projects = SqlProjectRepository(db)
            yield
        finally:
            if db is not None:
                await db.close()

    app = FastAPI(title="CRM API", lifespan=lifespan)
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:
    # --- REST: health ---

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # --- REST: contacts ---

    @app.get("/contacts")
    async def list_contacts(
        request: Request, page: int | None = None, limit: int | None = None
    ):
        logger.debug("GET /contacts page=%s limit=%s", page, limit)
        result = await ListContacts(_contacts(request)).execute(page, limit)
        return result.to_dto()

    @app.post("/contacts", status_code=201)
    async def create_contact(request: Request, body: dict[str, Any] = Body(...)):
        data = _require_valid(validate_new_contact(body), "Invalid contact data")
        contact = await CreateContact(_contacts(request)).execute(data)
        logger.info("POST /contacts created %s", contact.id)
        return contact.to_dto()

    @app.get("/contacts/{contact_id}")
    async def get_contact(contact_id: str, request: Request):
        validate_id(contact_id)
        contact = await GetContact(_contacts(request)).execute(contact_id)
        return contact.to_dto()

    @app.put("/contacts/{contact_id}")
    async def update_contact(
        contact_id: str, request: Request, body: dict[str, Any] = Body(...)
    ):
        validate_id(contact_id)
        changes = _require_valid(validate_contact_changes(body), "Invalid update data")
        contact = await UpdateContact(_contacts(request)).execute(contact_id, changes)
        return contact.to_dto()

    @app.delete("/contacts/{contact_id}")
    async def delete_contact(contact_id: str, request: Request):
        validate_id(contact_id)
        await DeleteContact(_contacts(request)).execute(contact_id)
        return {"message": "Contact deleted successfully."}

    @app.post("/contacts/{contact_id}/promote")
    async def promote_contact(contact_id: str, request: Request):
        validate_id(contact_id)
        contact = await PromoteContact(_contacts(request)).execute(contact_id)
        return contact.to_dto()

    # --- REST: projects ---

    @app.get("/projects")
    async def list_projects(
        request: Request, page: int | None = None, limit: int | None = None
    ):
        logger.debug("GET /projects page=%s limit=%s", page, limit)
        result = await ListProjects(_projects(request)).execute(page, limit)
        return result.to_dto()

    @app.post("/projects", status_code=201)
    async def create_project(request: Request, body: dict[str, Any] = Body(...)):
        promote = _promote_flag(body)
        data = _require_valid(
            validate_new_project(body, strict=_strict(request)), "Invalid project data"
        )
        saved = await CreateProjectWithPromotion(
            _contacts(request), _projects(request)
        ).execute(data, promote_contact=promote)
        if saved.promoted_contact is not None:
            logger.info("POST /projects promoted contact %s", saved.promoted_contact.id)
        logger.info("POST /projects created %s", saved.project.id)
        return saved.project.to_dto()

    @app.get("/projects/promotion-offer")
    async def promotion_offer(
        request: Request,
        contact_id: str = Query(..., alias="contactId"),
        status: str = Query(...),
    ):
        validate_id(contact_id)
        try:
            project_status = ProjectStatus(status)
        except ValueError:
            raise AppError.bad_request("Invalid status.") from None
        offer = await CheckPromotion(_contacts(request)).execute(contact_id, project_status)
        return offer.to_dto()

    @app.get("/projects/contact/{contact_id}")
    async def list_projects_by_contact(
        contact_id: str,
        request: Request,
        page: int | None = None,
        limit: int | None = None,
    ):
        validate_id(contact_id)
        result = await ListProjectsByContact(_projects(request)).execute(
            contact_id, page, limit
        )
        return result.to_dto()

    @app.get("/projects/{project_id}")
    async def get_project(project_id: str, request: Request):
        validate_id(project_id)
        project = await GetProject(_projects(request)).execute(project_id)
        return project.to_dto()

    @app.put("/projects/{project_id}")
    async def update_project(
        project_id: str, request: Request, body: dict[str, Any] = Body(...)
    ):
        validate_id(project_id)
        promote = _promote_flag(body)
        changes = _require_valid(
            validate_project_changes(body, strict=_strict(request)),
            "Invalid project update data",
        )
        saved = await UpdateProjectWithPromotion(
            _contacts(request), _projects(request)
        ).execute(project_id, changes, promote_contact=promote)
        if saved.promoted_contact is not None:
            logger.info("PUT /projects/%s promoted contact %s", project_id, saved.promoted_contact.id)
        return saved.project.to_dto()

    @app.delete("/projects/{project_id}")
    async def delete_project(project_id: str, request: Request):
        validate_id(project_id)
        await DeleteProject(_projects(request)).execute(project_id)
        return {"message": "Project deleted successfully."}


app = create_app()
