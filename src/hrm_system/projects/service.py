from __future__ import annotations

from typing import Any, Mapping

from ..common.validators import optional_text, require_non_empty
from ..core.exceptions import NotFoundError
from ..tasks.repository import TaskRepository
from .model import Project, ProjectOverview
from .repository import ProjectRepository


class ProjectService:
    def __init__(self, projects: ProjectRepository, tasks: TaskRepository):
        self._projects = projects
        self._tasks = tasks

    def get(self, project_id: int) -> Project:
        p = self._projects.get_by_id(int(project_id))
        if not p:
            raise NotFoundError("Project not found")
        return p

    def overview(self) -> list[ProjectOverview]:
        tasks = self._tasks.list_all()
        out = []
        for p in self._projects.list_all():
            mine = [t for t in tasks if t.project_id == p.project_id]
            out.append(
                ProjectOverview(
                    project=p,
                    total_tasks=len(mine),
                    completed_tasks=sum(1 for t in mine if t.is_completed),
                )
            )
        return out

    def create(self, form: Mapping[str, Any]) -> int:
        return self._projects.create(
            project_name=require_non_empty(form.get("project_name"), "Project name"),
            client_name=require_non_empty(form.get("client_name"), "Client name"),
            project_details=optional_text(form.get("project_details")),
        )

    def update(self, project_id: int, form: Mapping[str, Any]) -> None:
        self.get(project_id)
        ok = self._projects.update(
            int(project_id),
            project_name=require_non_empty(form.get("project_name"), "Project name"),
            client_name=require_non_empty(form.get("client_name"), "Client name"),
            project_details=optional_text(form.get("project_details")),
        )
        if not ok:
            raise NotFoundError("Project not found")

    def delete(self, project_id: int) -> None:
        if not self._projects.delete(int(project_id)):
            raise NotFoundError("Project not found")
