from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Project
from .repository import ProjectRepository


def _row_to_project(r: dict) -> Project:
    return Project(
        project_id=int(r["project_id"]),
        project_name=r["project_name"],
        client_name=r["client_name"],
        project_details=r.get("project_details"),
        project_created=r["project_created"],
    )


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, project_id: int) -> Optional[Project]:
        with db_cursor(self._conn_factory, operation="load project") as (_, cur):
            cur.execute(
                """
                SELECT project_id, project_name, client_name, project_details, project_created
                FROM projects WHERE project_id=%s
                """,
                (int(project_id),),
            )
            r = fetchone(cur)
            return _row_to_project(r) if r else None

    def list_all(self) -> Sequence[Project]:
        with db_cursor(self._conn_factory, operation="list projects") as (_, cur):
            cur.execute(
                """
                SELECT project_id, project_name, client_name, project_details, project_created
                FROM projects ORDER BY project_created DESC, project_id DESC
                """
            )
            return [_row_to_project(r) for r in fetchall(cur)]

    def create(self, *, project_name: str, client_name: str, project_details: Optional[str]) -> int:
        with db_cursor(self._conn_factory, operation="create project") as (_, cur):
            cur.execute(
                "INSERT INTO projects(project_name, client_name, project_details) VALUES(%s,%s,%s)",
                (project_name, client_name, project_details),
            )
            return int(cur.lastrowid)

    def update(self, project_id: int, *, project_name: str, client_name: str, project_details: Optional[str]) -> bool:
        with db_cursor(self._conn_factory, operation="update project") as (_, cur):
            cur.execute(
                """
                UPDATE projects SET project_name=%s, client_name=%s, project_details=%s
                WHERE project_id=%s
                """,
                (project_name, client_name, project_details, int(project_id)),
            )
            return cur.rowcount > 0

    def delete(self, project_id: int) -> bool:
        with db_cursor(self._conn_factory, operation="delete project") as (_, cur):
            cur.execute("DELETE FROM projects WHERE project_id=%s", (int(project_id),))
            return cur.rowcount > 0
