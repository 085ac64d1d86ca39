from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Attachment:
    url: str
    name: str
    size: int
    content_type: str


@dataclass(frozen=True)
class Task:
    task_id: int
    project_id: Optional[int]
    task_name: str
    task_details: Optional[str]
    task_created: datetime
    task_deadline: date
    assigned_to: int
    is_completed: bool
    completed_at: Optional[datetime]
    attachment: Optional[Attachment] = None

    def is_overdue(self, today: date) -> bool:
        return not self.is_completed and self.task_deadline < today


@dataclass(frozen=True)
class TaskInput:
    project_id: Optional[int]
    task_name: str
    task_details: Optional[str]
    task_deadline: date
    assigned_to: int


@dataclass(frozen=True)
class TaskView:
    """Task with resolved assignee name and overdue flag."""

    task: Task
    assignee_name: str
    is_overdue: bool
