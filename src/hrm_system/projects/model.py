from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Project:
    project_id: int
    project_name: str
    client_name: str
    project_details: Optional[str]
    project_created: datetime


@dataclass(frozen=True)
class ProjectOverview:
    """Read-model: project with its task counters."""

    project: Project
    total_tasks: int
    completed_tasks: int
