from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from hrm_system.activities.model import ActivityKind
from hrm_system.activities.service import ActivityService
from hrm_system.core.enums import AttendanceStatus
from hrm_system.core.exceptions import ValidationError
from hrm_system.dashboard.service import DashboardService
from hrm_system.payroll.service import PayrollService
from hrm_system.tasks.model import TaskInput


@pytest.fixture
def populated(employees, attendance, payrolls, projects, tasks, fixed_now):
    attendance.add(1, date(2026, 2, 27))
    attendance.add(2, date(2026, 2, 27), hours="6")
    PayrollService(payrolls, attendance, employees, clock=lambda: datetime(2026, 2, 28, 18, 0)).generate()

    attendance.add(1, fixed_now.date())
    attendance.add(2, fixed_now.date(), AttendanceStatus.ABSENT, "0")

    project_id = projects.create(project_name="Site", client_name="Acme", project_details=None)
    tasks.create(TaskInput(project_id=project_id, task_name="Design", task_details=None, task_deadline=date(2026, 2, 1), assigned_to=1))
    tasks.create(TaskInput(project_id=None, task_name="Audit", task_details=None, task_deadline=date(2026, 4, 1), assigned_to=2))
    tasks.set_completion(2, is_completed=True, completed_at=datetime(2026, 3, 1, 12, 0))


def test_activity_kinds_carry_display_metadata():
    assert ActivityKind.TASK_COMPLETED.family == "task"
    assert ActivityKind.ATTENDANCE_ABSENT.family == "attendance"
    assert (ActivityKind.PAYROLL.icon, ActivityKind.PAYROLL.color) == ("dollar-sign", "purple")
    assert ActivityKind.ATTENDANCE_ABSENT.color == "red"


def test_feed_is_newest_first_and_filterable(populated, employees, tasks, payrolls, attendance):
    svc = ActivityService(employees, tasks, payrolls, attendance)

    feed = svc.feed()
    stamps = [a.timestamp for a in feed]
    assert stamps == sorted(stamps, reverse=True)
    assert feed[0].kind in (ActivityKind.ATTENDANCE_PRESENT, ActivityKind.ATTENDANCE_ABSENT)

    kinds = {a.kind for a in svc.feed(family="task")}
    assert kinds == {ActivityKind.TASK_ASSIGNED, ActivityKind.TASK_COMPLETED}

    jose = svc.feed(family="attendance", search="jose")
    assert [a.message for a in jose] == ["Jose Reyes marked absent", "Jose Reyes marked present"]

    assert svc.feed(limit=3) == feed[:3]
    assert svc.feed(family="payroll")[0].to_dict()["icon"] == "dollar-sign"


def test_feed_rejects_unknown_family(employees, tasks, payrolls, attendance):
    with pytest.raises(ValidationError):
        ActivityService(employees, tasks, payrolls, attendance).feed(family="holidays")


def test_dashboard_stats(populated, employees, projects, tasks, attendance, payrolls, fixed_now):
    payroll_service = PayrollService(payrolls, attendance, employees)
    svc = DashboardService(employees, projects, tasks, attendance, payrolls, payroll_service, clock=lambda: fixed_now)

    stats = svc.stats()

    assert (stats.total_employees, stats.active_employees) == (2, 2)
    assert (stats.total_projects, stats.total_tasks) == (1, 2)
    assert (stats.completed_tasks, stats.pending_tasks, stats.overdue_tasks) == (1, 1, 1)
    assert (stats.today_present, stats.today_absent, stats.attendance_rate) == (1, 1, 50)
    assert stats.recent_payrolls == 2
    # Maria: 8h at 16000/160 = 800; Jose: 1 day at 500
    assert stats.total_payroll_amount == Decimal("1300.00")
