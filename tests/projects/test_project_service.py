from __future__ import annotations

from datetime import date

import pytest

from hrm_system.core.exceptions import NotFoundError, ValidationError
from hrm_system.projects.service import ProjectService
from hrm_system.tasks.model import TaskInput


@pytest.fixture
def service(projects, tasks):
    return ProjectService(projects, tasks)


def test_create_and_update(service, projects):
    project_id = service.create({"project_name": "Payroll portal", "client_name": "Acme", "project_details": " "})
    assert projects.get_by_id(project_id).project_details is None

    service.update(project_id, {"project_name": "Payroll portal v2", "client_name": "Acme"})
    assert service.get(project_id).project_name == "Payroll portal v2"


def test_create_requires_name_and_client(service):
    with pytest.raises(ValidationError):
        service.create({"project_name": "X"})


def test_overview_counts_tasks(service, projects, tasks):
    project_id = service.create({"project_name": "Site", "client_name": "Acme"})
    other_id = service.create({"project_name": "App", "client_name": "Beta"})
    for name in ("a", "b", "c"):
        tasks.create(
            TaskInput(project_id=project_id, task_name=name, task_details=None, task_deadline=date(2026, 4, 1), assigned_to=1)
        )
    tasks.set_completion(1, is_completed=True, completed_at=None)

    overview = {o.project.project_id: o for o in service.overview()}

    assert (overview[project_id].total_tasks, overview[project_id].completed_tasks) == (3, 1)
    assert (overview[other_id].total_tasks, overview[other_id].completed_tasks) == (0, 0)


def test_delete_missing_project(service):
    with pytest.raises(NotFoundError):
        service.delete(1)
