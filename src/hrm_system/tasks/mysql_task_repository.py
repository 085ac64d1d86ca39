from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Attachment, Task, TaskInput
from .repository import TaskRepository

_COLUMNS = """
    task_id, project_id, task_name, task_details, task_created, task_deadline,
    assigned_to, is_completed, completed_at,
    attachment_url, attachment_name, attachment_size, attachment_type
"""


def _row_to_task(r: dict) -> Task:
    attachment = None
    if r.get("attachment_url"):
        attachment = Attachment(
            url=r["attachment_url"],
            name=r.get("attachment_name") or "",
            size=int(r.get("attachment_size") or 0),
            content_type=r.get("attachment_type") or "application/octet-stream",
        )
    project_id = r.get("project_id")
    return Task(
        task_id=int(r["task_id"]),
        project_id=int(project_id) if project_id is not None else None,
        task_name=r["task_name"],
        task_details=r.get("task_details"),
        task_created=r["task_created"],
        task_deadline=r["task_deadline"],
        assigned_to=int(r["assigned_to"]),
        is_completed=bool(r["is_completed"]),
        completed_at=r.get("completed_at"),
        attachment=attachment,
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory, operation="load task") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE task_id=%s", (int(task_id),))
            r = fetchone(cur)
            return _row_to_task(r) if r else None

    def list_all(self, *, project_id: Optional[int] = None) -> Sequence[Task]:
        clauses = ["1=1"]
        params: list[object] = []
        if project_id is not None:
            clauses.append("project_id=%s")
            params.append(int(project_id))

        with db_cursor(self._conn_factory, operation="list tasks") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM tasks
                WHERE {' AND '.join(clauses)}
                ORDER BY task_deadline ASC, task_id ASC
                """,
                tuple(params),
            )
            return [_row_to_task(r) for r in fetchall(cur)]

    def list_for_employee(self, employee_id: int) -> Sequence[Task]:
        with db_cursor(self._conn_factory, operation="list employee tasks") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM tasks
                WHERE assigned_to=%s
                ORDER BY is_completed ASC, task_deadline ASC, task_id ASC
                """,
                (int(employee_id),),
            )
            return [_row_to_task(r) for r in fetchall(cur)]

    def create(self, data: TaskInput) -> int:
        with db_cursor(self._conn_factory, operation="create task") as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(project_id, task_name, task_details, task_deadline, assigned_to)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (data.project_id, data.task_name, data.task_details, data.task_deadline, int(data.assigned_to)),
            )
            return int(cur.lastrowid)

    def update_open(self, task_id: int, data: TaskInput) -> bool:
        with db_cursor(self._conn_factory, operation="update task") as (_, cur):
            cur.execute(
                """
                UPDATE tasks
                SET project_id=%s, task_name=%s, task_details=%s, task_deadline=%s, assigned_to=%s
                WHERE task_id=%s AND is_completed=0
                """,
                (
                    data.project_id,
                    data.task_name,
                    data.task_details,
                    data.task_deadline,
                    int(data.assigned_to),
                    int(task_id),
                ),
            )
            return cur.rowcount > 0

    def set_completion(self, task_id: int, *, is_completed: bool, completed_at: Optional[datetime]) -> bool:
        with db_cursor(self._conn_factory, operation="toggle task") as (_, cur):
            cur.execute(
                "UPDATE tasks SET is_completed=%s, completed_at=%s WHERE task_id=%s",
                (1 if is_completed else 0, completed_at, int(task_id)),
            )
            return cur.rowcount > 0

    def set_attachment(self, task_id: int, attachment: Optional[Attachment]) -> bool:
        a = attachment
        with db_cursor(self._conn_factory, operation="attach file to task") as (_, cur):
            cur.execute(
                """
                UPDATE tasks
                SET attachment_url=%s, attachment_name=%s, attachment_size=%s, attachment_type=%s
                WHERE task_id=%s
                """,
                (
                    a.url if a else None,
                    a.name if a else None,
                    a.size if a else None,
                    a.content_type if a else None,
                    int(task_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, task_id: int) -> bool:
        with db_cursor(self._conn_factory, operation="delete task") as (_, cur):
            cur.execute("DELETE FROM tasks WHERE task_id=%s", (int(task_id),))
            return cur.rowcount > 0
