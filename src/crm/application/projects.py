"""Project use cases. One class per operation, each with a single execute()."""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from crm.application.dto import NewProject, PageRequest, ProjectList, page_and_count
from crm.application.errors import AppError, repository_errors
from crm.application.ports import ProjectRepository
from crm.domain import Project, utcnow
from crm.domain.entities import as_utc

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class CreateProject:
    """Create a project. A due date, when given, must lie strictly in the future."""

    def __init__(self, repository: ProjectRepository, *, clock: Clock = utcnow) -> None:
        self._repo = repository
        self._clock = clock

    def check(self, data: NewProject) -> None:
        """Business rules that need no storage. Raises AppError (BadRequest)."""
        if data.due_date is None:
            return
        due_date = as_utc(data.due_date)
        if due_date <= self._clock():
            logger.info("CreateProject: due date %s is not in the future", due_date)
            raise AppError.bad_request(
                f"Invalid due date: must be a future date, received {due_date.isoformat()}"
            )

    async def execute(self, data: NewProject) -> Project:
        logger.debug("CreateProject.execute called with data=%s", data)
        self.check(data)

        with repository_errors("Error creating project."):
            project = await self._repo.create(data)
        logger.info("CreateProject: new project created with id=%s", project.id)
        return project


class GetProject:
    def __init__(self, repository: ProjectRepository) -> None:
        self._repo = repository

    async def execute(self, project_id: str) -> Project:
        logger.debug("GetProject.execute called with id=%s", project_id)
        with repository_errors(f"Error retrieving project with ID {project_id}"):
            project = await self._repo.find_by_id(project_id)
        if project is None:
            logger.info("GetProject: no project found for id=%s", project_id)
            raise AppError.not_found(f"Project not found with ID {project_id}")
        return project


class UpdateProject:
    def __init__(self, repository: ProjectRepository) -> None:
        self._repo = repository

    async def execute(self, project_id: str, changes: Mapping[str, Any]) -> Project:
        logger.debug("UpdateProject.execute called with id=%s changes=%s", project_id, changes)
        with repository_errors(f"Error retrieving project with ID {project_id}"):
            existing = await self._repo.find_by_id(project_id)
        if existing is None:
            logger.info("UpdateProject: no project found for id=%s", project_id)
            raise AppError.not_found(f"Project with ID {project_id} not found for update.")

        with repository_errors(f"Error updating project with ID {project_id}"):
            updated = await self._repo.update(project_id, dict(changes))
        logger.info("UpdateProject: project updated, id=%s", updated.id)
        return updated


class DeleteProject:
    def __init__(self, repository: ProjectRepository) -> None:
        self._repo = repository

    async def execute(self, project_id: str) -> None:
        logger.debug("DeleteProject.execute called with id=%s", project_id)
        with repository_errors(f"Error retrieving project with ID {project_id}"):
            existing = await self._repo.find_by_id(project_id)
        if existing is None:
            logger.info("DeleteProject: no project found for id=%s", project_id)
            raise AppError.not_found(
                f"Project not found. Unable to delete project with ID {project_id}."
            )

        with repository_errors(f"Unexpected error while deleting project with ID {project_id}."):
            await self._repo.delete(project_id)
        logger.info("DeleteProject: project deleted, id=%s", project_id)


class ListProjects:
    def __init__(self, repository: ProjectRepository) -> None:
        self._repo = repository

    async def execute(self, page: int | None = None, limit: int | None = None) -> ProjectList:
        logger.debug("ListProjects.execute called with page=%s limit=%s", page, limit)
        request = PageRequest.from_page(page, limit)

        with repository_errors("Error retrieving projects."):
            data, total_count = await page_and_count(
                self._repo.find_many(request), self._repo.count()
            )
        logger.info("ListProjects: retrieved %d projects, totalCount=%d", len(data), total_count)
        return ProjectList(data=list(data), total_count=total_count)


class ListProjectsByContact:
    def __init__(self, repository: ProjectRepository) -> None:
        self._repo = repository

    async def execute(
        self, contact_id: str, page: int | None = None, limit: int | None = None
    ) -> ProjectList:
        logger.debug(
            "ListProjectsByContact.execute called with contact_id=%s page=%s limit=%s",
            contact_id,
            page,
            limit,
        )
        request = PageRequest.from_page(page, limit)

        with repository_errors("Error retrieving projects for the given contact."):
            data, total_count = await page_and_count(
                self._repo.find_by_contact_id(contact_id, request),
                self._repo.count_by_contact_id(contact_id),
            )
        logger.info(
            "ListProjectsByContact: retrieved %d projects for contact %s, totalCount=%d",
            len(data),
            contact_id,
            total_count,
        )
        return ProjectList(data=list(data), total_count=total_count)
