from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_date, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..integrations.attachments import AttachmentStorage
from ..projects.repository import ProjectRepository
from .model import Attachment, Task, TaskInput, TaskView
from .repository import TaskRepository

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(
        self,
        tasks: TaskRepository,
        employees: EmployeeRepository,
        projects: ProjectRepository,
        *,
        storage: Optional[AttachmentStorage] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._tasks = tasks
        self._employees = employees
        self._projects = projects
        self._storage = storage
        self._clock = clock

    def get(self, task_id: int) -> Task:
        t = self._tasks.get_by_id(int(task_id))
        if not t:
            raise NotFoundError("Task not found")
        return t

    def _view(self, task: Task, names: Mapping[int, str]) -> TaskView:
        return TaskView(
            task=task,
            assignee_name=names.get(task.assigned_to, ""),
            is_overdue=task.is_overdue(self._clock().date()),
        )

    def list_all(self, *, project_id: Optional[int] = None) -> list[TaskView]:
        names = {e.employee_id: e.name for e in self._employees.list_all()}
        return [self._view(t, names) for t in self._tasks.list_all(project_id=project_id)]

    def list_for_employee(self, employee_id: int, *, hide_completed: bool = False) -> list[TaskView]:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise NotFoundError("Employee not found")

        rows = [t for t in self._tasks.list_for_employee(emp.employee_id) if not (hide_completed and t.is_completed)]
        rows.sort(key=lambda t: (t.is_completed, t.task_deadline, t.task_id))
        return [self._view(t, {emp.employee_id: emp.name}) for t in rows]

    def parse_input(self, form: Mapping[str, Any]) -> TaskInput:
        try:
            assigned_to = int(form.get("assigned_to") or 0)
        except (TypeError, ValueError):
            raise ValidationError("Assignee is invalid")
        if not assigned_to or not self._employees.get_by_id(assigned_to):
            raise ValidationError("Assignee does not exist")

        project_id = None
        raw_project = form.get("project_id")
        if raw_project not in (None, ""):
            try:
                project_id = int(raw_project)
            except (TypeError, ValueError):
                raise ValidationError("Project is invalid")
            if not self._projects.get_by_id(project_id):
                raise ValidationError("Project does not exist")

        return TaskInput(
            project_id=project_id,
            task_name=require_non_empty(form.get("task_name"), "Task name"),
            task_details=optional_text(form.get("task_details")),
            task_deadline=require_date(form.get("task_deadline"), "Deadline"),
            assigned_to=assigned_to,
        )

    def create(self, form: Mapping[str, Any]) -> int:
        data = self.parse_input(form)
        task_id = self._tasks.create(data)
        logger.info("task %s assigned to employee %s", task_id, data.assigned_to)
        return task_id

    def update(self, task_id: int, form: Mapping[str, Any]) -> None:
        if self.get(task_id).is_completed:
            raise ValidationError("Completed tasks cannot be edited")
        data = self.parse_input(form)
        if not self._tasks.update_open(int(task_id), data):
            if self.get(task_id).is_completed:
                raise ValidationError("Completed tasks cannot be edited")
            raise NotFoundError("Task not found")

    def toggle_completion(self, task_id: int) -> Task:
        task = self.get(task_id)
        done = not task.is_completed
        completed_at = self._clock() if done else None
        if not self._tasks.set_completion(task.task_id, is_completed=done, completed_at=completed_at):
            raise NotFoundError("Task not found")
        return self.get(task_id)

    def delete(self, task_id: int) -> None:
        if not self._tasks.delete(int(task_id)):
            raise NotFoundError("Task not found")

    def attach(self, task_id: int, *, data: bytes, filename: str, content_type: str) -> Attachment:
        self.get(task_id)
        if self._storage is None:
            raise ValidationError("Attachment storage is not configured")

        stored = self._storage.save(data, filename, content_type)
        attachment = Attachment(url=stored.url, name=stored.name, size=stored.size, content_type=stored.content_type)
        if not self._tasks.set_attachment(int(task_id), attachment):
            raise NotFoundError("Task not found")
        return attachment
