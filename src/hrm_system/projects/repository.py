from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Project


class ProjectRepository(Protocol):
    def get_by_id(self, project_id: int) -> Optional[Project]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Project]:
        """Projects, newest first."""

        raise NotImplementedError

    def create(self, *, project_name: str, client_name: str, project_details: Optional[str]) -> int:
        raise NotImplementedError

    def update(self, project_id: int, *, project_name: str, client_name: str, project_details: Optional[str]) -> bool:
        raise NotImplementedError

    def delete(self, project_id: int) -> bool:
        """Delete a project; the store cascades to its tasks."""

        raise NotImplementedError
