from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Attachment, Task, TaskInput


class TaskRepository(Protocol):
    def get_by_id(self, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def list_all(self, *, project_id: Optional[int] = None) -> Sequence[Task]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[Task]:
        raise NotImplementedError

    def create(self, data: TaskInput) -> int:
        raise NotImplementedError

    def update_open(self, task_id: int, data: TaskInput) -> bool:
        """Update a task only while it is not completed."""

        raise NotImplementedError

    def set_completion(self, task_id: int, *, is_completed: bool, completed_at: Optional[datetime]) -> bool:
        raise NotImplementedError

    def set_attachment(self, task_id: int, attachment: Optional[Attachment]) -> bool:
        raise NotImplementedError

    def delete(self, task_id: int) -> bool:
        raise NotImplementedError
