from __future__ import annotations

from datetime import date, datetime

import pytest

from hrm_system.core.exceptions import NotFoundError, ValidationError
from hrm_system.integrations.attachments import StoredAttachment
from hrm_system.tasks.service import TaskService


class RecordingStorage:
    def __init__(self):
        self.saved: list[tuple[bytes, str, str]] = []

    def save(self, data: bytes, filename: str, content_type: str) -> StoredAttachment:
        self.saved.append((data, filename, content_type))
        return StoredAttachment(url=f"/attachments/x_{filename}", name=filename, size=len(data), content_type=content_type)

    def open_path(self, stored_name: str):
        raise FileNotFoundError(stored_name)


@pytest.fixture
def storage():
    return RecordingStorage()


@pytest.fixture
def service(tasks, employees, projects, storage, fixed_now):
    return TaskService(tasks, employees, projects, storage=storage, clock=lambda: fixed_now)


def _form(**overrides):
    form = {"task_name": "Prepare payslips", "task_deadline": "2026-03-10", "assigned_to": 1}
    form.update(overrides)
    return form


def test_create_task(service, tasks):
    task_id = service.create(_form(task_details="  for February "))

    t = tasks.get_by_id(task_id)
    assert t.task_details == "for February"
    assert t.project_id is None
    assert not t.is_completed


@pytest.mark.parametrize(
    "overrides",
    [
        {"assigned_to": None},
        {"assigned_to": 77},
        {"task_deadline": ""},
        {"task_name": ""},
        {"project_id": 5},
    ],
)
def test_create_validates(service, overrides):
    with pytest.raises(ValidationError):
        service.create(_form(**overrides))


def test_toggle_sets_and_clears_completed_at(service, fixed_now):
    task_id = service.create(_form())

    done = service.toggle_completion(task_id)
    assert done.is_completed and done.completed_at == fixed_now

    reopened = service.toggle_completion(task_id)
    assert not reopened.is_completed and reopened.completed_at is None


def test_completed_task_cannot_be_edited(service, tasks):
    task_id = service.create(_form())
    service.toggle_completion(task_id)

    with pytest.raises(ValidationError):
        service.update(task_id, _form(task_name="Renamed"))
    assert tasks.get_by_id(task_id).task_name == "Prepare payslips"


def test_overdue_flag(service):
    service.create(_form(task_name="late", task_deadline="2026-03-01"))
    service.create(_form(task_name="due today", task_deadline="2026-03-02"))
    done_id = service.create(_form(task_name="late but done", task_deadline="2026-02-01"))
    service.toggle_completion(done_id)

    flags = {v.task.task_name: v.is_overdue for v in service.list_all()}

    assert flags == {"late": True, "due today": False, "late but done": False}


def test_list_for_employee_puts_incomplete_first(service):
    first = service.create(_form(task_name="first", task_deadline="2026-03-05"))
    service.create(_form(task_name="second", task_deadline="2026-03-20"))
    service.create(_form(task_name="jose's", assigned_to=2))
    service.toggle_completion(first)

    names = [v.task.task_name for v in service.list_for_employee(1)]
    assert names == ["second", "first"]

    open_only = service.list_for_employee(1, hide_completed=True)
    assert [v.task.task_name for v in open_only] == ["second"]
    assert open_only[0].assignee_name == "Maria Santos"


def test_attach_file(service, tasks, storage):
    task_id = service.create(_form())

    attachment = service.attach(task_id, data=b"%PDF-1.4", filename="brief.pdf", content_type="application/pdf")

    assert attachment.size == 8
    assert tasks.get_by_id(task_id).attachment == attachment
    assert storage.saved == [(b"%PDF-1.4", "brief.pdf", "application/pdf")]


def test_attach_to_missing_task(service, storage):
    with pytest.raises(NotFoundError):
        service.attach(9, data=b"x", filename="a.txt", content_type="text/plain")
    assert storage.saved == []


def test_delete_task(service, tasks):
    task_id = service.create(_form())
    service.delete(task_id)
    assert tasks.get_by_id(task_id) is None
