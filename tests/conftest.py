from __future__ import annotations

import dataclasses
import threading
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

import pytest

from hrm_system.appointments.model import Appointment, AppointmentInput
from hrm_system.attendance.model import AttendanceInput, AttendanceRecord
from hrm_system.core.enums import AppointmentStatus, AttendanceStatus, EmploymentStatus, SalaryType
from hrm_system.core.exceptions import DuplicateRecordError, ExternalServiceError
from hrm_system.employees.model import Employee, EmployeeInput
from hrm_system.payroll.model import Payroll, PayrollTotals
from hrm_system.projects.model import Project
from hrm_system.tasks.model import Attachment, Task, TaskInput


class InMemoryEmployees:
    def __init__(self):
        self.rows: dict[int, Employee] = {}
        self._id = 0

    def add(
        self,
        name: str,
        *,
        salary_type: SalaryType = SalaryType.MONTHLY,
        salary_rate: str = "16000",
        status: EmploymentStatus = EmploymentStatus.ACTIVE,
        created_at: Optional[datetime] = None,
    ) -> Employee:
        self._id += 1
        emp = Employee(
            employee_id=self._id,
            name=name,
            address="1 Main St",
            contact_number="0917-000-0000",
            email=f"{name.split()[0].lower()}@example.com",
            date_hired=date(2024, 1, 1),
            employment_status=status,
            salary_rate=Decimal(salary_rate),
            salary_type=salary_type,
            created_at=created_at or datetime(2024, 1, 1, 9, 0),
        )
        self.rows[emp.employee_id] = emp
        return emp

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.rows.get(employee_id)

    def list_all(self, *, status: Optional[EmploymentStatus] = None):
        rows = sorted(self.rows.values(), key=lambda e: e.name)
        return [e for e in rows if status is None or e.employment_status == status]

    def create(self, data: EmployeeInput) -> int:
        self._id += 1
        self.rows[self._id] = Employee(employee_id=self._id, created_at=datetime(2026, 1, 1), **dataclasses.asdict(data))
        return self._id

    def update(self, employee_id: int, data: EmployeeInput) -> bool:
        cur = self.rows.get(employee_id)
        if not cur:
            return False
        self.rows[employee_id] = dataclasses.replace(cur, **dataclasses.asdict(data))
        return True

    def delete(self, employee_id: int) -> bool:
        return self.rows.pop(employee_id, None) is not None


class InMemoryAttendance:
    """Mirrors the SQL predicates: link/update/delete only touch unpaid rows."""

    def __init__(self):
        self.rows: dict[int, AttendanceRecord] = {}
        self._id = 0
        self._lock = threading.Lock()

    def add(
        self,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
        hours: str = "8",
        *,
        payroll_id: Optional[int] = None,
    ) -> AttendanceRecord:
        with self._lock:
            self._id += 1
            rec = AttendanceRecord(
                attendance_id=self._id,
                employee_id=employee_id,
                work_date=work_date,
                status=status,
                hours_worked=Decimal(hours),
                payroll_id=payroll_id,
                created_at=datetime.combine(work_date, time(17, 0)),
            )
            self.rows[rec.attendance_id] = rec
            return rec

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.rows.get(attendance_id)

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        for r in self.rows.values():
            if r.employee_id == employee_id and r.work_date == work_date:
                return r
        return None

    def list_for_employee(self, employee_id: int):
        return sorted((r for r in self.rows.values() if r.employee_id == employee_id), key=lambda r: r.work_date, reverse=True)

    def list_between(self, *, start_date=None, end_date=None, employee_id=None):
        out = [
            r
            for r in self.rows.values()
            if (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
            and (employee_id is None or r.employee_id == employee_id)
        ]
        return sorted(out, key=lambda r: (r.work_date, r.employee_id))

    def list_unpaid(self, *, employee_id: Optional[int] = None):
        with self._lock:
            out = [
                r
                for r in self.rows.values()
                if r.payroll_id is None and (employee_id is None or r.employee_id == employee_id)
            ]
        return sorted(out, key=lambda r: (r.employee_id, r.work_date))

    def list_for_payroll(self, payroll_id: int):
        return sorted((r for r in self.rows.values() if r.payroll_id == payroll_id), key=lambda r: r.work_date)

    def create(self, data: AttendanceInput) -> int:
        if self.get_for_employee_and_date(data.employee_id, data.work_date):
            raise DuplicateRecordError("Attendance already exists for this employee on this date")
        rec = self.add(data.employee_id, data.work_date, data.status, str(data.hours_worked))
        return rec.attendance_id

    def update_unpaid(self, attendance_id: int, data: AttendanceInput) -> bool:
        cur = self.rows.get(attendance_id)
        if not cur or cur.payroll_id is not None:
            return False
        self.rows[attendance_id] = dataclasses.replace(cur, **dataclasses.asdict(data))
        return True

    def delete_unpaid(self, attendance_id: int) -> bool:
        cur = self.rows.get(attendance_id)
        if not cur or cur.payroll_id is not None:
            return False
        del self.rows[attendance_id]
        return True

    def link_to_payroll(self, rows, payroll_id: int) -> int:
        n = 0
        with self._lock:
            for seen in rows:
                cur = self.rows.get(seen.attendance_id)
                if (
                    cur
                    and cur.payroll_id is None
                    and (cur.employee_id, cur.status, cur.hours_worked)
                    == (seen.employee_id, seen.status, seen.hours_worked)
                ):
                    self.rows[cur.attendance_id] = dataclasses.replace(cur, payroll_id=payroll_id)
                    n += 1
        return n

    def unlink_payroll(self, payroll_id: int) -> int:
        n = 0
        with self._lock:
            for i, cur in list(self.rows.items()):
                if cur.payroll_id == payroll_id:
                    self.rows[i] = dataclasses.replace(cur, payroll_id=None)
                    n += 1
        return n


class InMemoryPayrolls:
    def __init__(self):
        self.rows: dict[int, Payroll] = {}
        self._id = 0
        self._store_lock = threading.Lock()
        self._id_lock = threading.Lock()

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        return self.rows.get(payroll_id)

    def list_for_employee(self, employee_id: int):
        rows = [p for p in self.rows.values() if p.employee_id == employee_id]
        return sorted(rows, key=lambda p: (p.generated_on, p.payroll_id), reverse=True)

    def list_all(self, *, since: Optional[datetime] = None):
        rows = [p for p in self.rows.values() if since is None or p.generated_on >= since]
        return sorted(rows, key=lambda p: (p.generated_on, p.payroll_id), reverse=True)

    def create(self, *, employee_id: int, totals: PayrollTotals, generated_on: datetime) -> int:
        with self._id_lock:
            self._id += 1
            pid = self._id
        self.rows[pid] = Payroll(
            payroll_id=pid,
            employee_id=employee_id,
            total_working_days=totals.total_working_days,
            total_absent_days=totals.total_absent_days,
            total_hours=totals.total_hours,
            generated_on=generated_on,
        )
        return pid

    def update_totals(self, payroll_id: int, totals: PayrollTotals) -> bool:
        cur = self.rows.get(payroll_id)
        if not cur:
            return False
        self.rows[payroll_id] = dataclasses.replace(cur, **dataclasses.asdict(totals))
        return True

    def delete(self, payroll_id: int) -> bool:
        return self.rows.pop(payroll_id, None) is not None

    def generation_lock(self):
        return self._store_lock


class InMemoryProjects:
    def __init__(self):
        self.rows: dict[int, Project] = {}
        self._id = 0

    def get_by_id(self, project_id: int) -> Optional[Project]:
        return self.rows.get(project_id)

    def list_all(self):
        return sorted(self.rows.values(), key=lambda p: p.project_id, reverse=True)

    def create(self, *, project_name: str, client_name: str, project_details: Optional[str]) -> int:
        self._id += 1
        self.rows[self._id] = Project(
            project_id=self._id,
            project_name=project_name,
            client_name=client_name,
            project_details=project_details,
            project_created=datetime(2026, 1, 1, 9, 0),
        )
        return self._id

    def update(self, project_id: int, *, project_name: str, client_name: str, project_details: Optional[str]) -> bool:
        cur = self.rows.get(project_id)
        if not cur:
            return False
        self.rows[project_id] = dataclasses.replace(
            cur, project_name=project_name, client_name=client_name, project_details=project_details
        )
        return True

    def delete(self, project_id: int) -> bool:
        return self.rows.pop(project_id, None) is not None


class InMemoryTasks:
    def __init__(self):
        self.rows: dict[int, Task] = {}
        self._id = 0

    def get_by_id(self, task_id: int) -> Optional[Task]:
        return self.rows.get(task_id)

    def list_all(self, *, project_id: Optional[int] = None):
        rows = [t for t in self.rows.values() if project_id is None or t.project_id == project_id]
        return sorted(rows, key=lambda t: (t.task_deadline, t.task_id))

    def list_for_employee(self, employee_id: int):
        return [t for t in self.rows.values() if t.assigned_to == employee_id]

    def create(self, data: TaskInput) -> int:
        self._id += 1
        self.rows[self._id] = Task(
            task_id=self._id,
            task_created=datetime(2026, 1, 1, 9, 0),
            is_completed=False,
            completed_at=None,
            **dataclasses.asdict(data),
        )
        return self._id

    def update_open(self, task_id: int, data: TaskInput) -> bool:
        cur = self.rows.get(task_id)
        if not cur or cur.is_completed:
            return False
        self.rows[task_id] = dataclasses.replace(cur, **dataclasses.asdict(data))
        return True

    def set_completion(self, task_id: int, *, is_completed: bool, completed_at: Optional[datetime]) -> bool:
        cur = self.rows.get(task_id)
        if not cur:
            return False
        self.rows[task_id] = dataclasses.replace(cur, is_completed=is_completed, completed_at=completed_at)
        return True

    def set_attachment(self, task_id: int, attachment: Optional[Attachment]) -> bool:
        cur = self.rows.get(task_id)
        if not cur:
            return False
        self.rows[task_id] = dataclasses.replace(cur, attachment=attachment)
        return True

    def delete(self, task_id: int) -> bool:
        return self.rows.pop(task_id, None) is not None


class InMemoryAppointments:
    def __init__(self):
        self.rows: dict[int, Appointment] = {}
        self._id = 0

    def get_by_id(self, appointment_id: int) -> Optional[Appointment]:
        return self.rows.get(appointment_id)

    def list_all(self, *, employee_id=None, status=None):
        rows = [
            a
            for a in self.rows.values()
            if (employee_id is None or a.assigned_employee == employee_id)
            and (status is None or a.appointment_status == status)
        ]
        return sorted(rows, key=lambda a: (a.appointment_date, a.appointment_time, a.appointment_id))

    def create(self, data: AppointmentInput, *, status: AppointmentStatus) -> int:
        self._id += 1
        self.rows[self._id] = Appointment(
            appointment_id=self._id,
            appointment_status=status,
            google_calendar_event_id=None,
            **dataclasses.asdict(data),
        )
        return self._id

    def update_open(self, appointment_id: int, data: AppointmentInput, *, status: AppointmentStatus) -> bool:
        cur = self.rows.get(appointment_id)
        if not cur or cur.appointment_status.is_terminal:
            return False
        self.rows[appointment_id] = dataclasses.replace(cur, appointment_status=status, **dataclasses.asdict(data))
        return True

    def transition(self, appointment_id: int, *, from_status, to_status) -> bool:
        cur = self.rows.get(appointment_id)
        if not cur or cur.appointment_status != from_status:
            return False
        self.rows[appointment_id] = dataclasses.replace(cur, appointment_status=to_status)
        return True

    def set_calendar_event(self, appointment_id: int, event_id: Optional[str]) -> bool:
        cur = self.rows.get(appointment_id)
        if not cur:
            return False
        self.rows[appointment_id] = dataclasses.replace(cur, google_calendar_event_id=event_id)
        return True

    def delete(self, appointment_id: int) -> bool:
        return self.rows.pop(appointment_id, None) is not None


class FakeCalendar:
    def __init__(self, *, fail: bool = False):
        self.fail = fail
        self.events: dict[str, dict] = {}
        self.calls: list[tuple[str, Optional[str]]] = []
        self._id = 0

    def _check(self, operation: str):
        if self.fail:
            raise ExternalServiceError(operation, RuntimeError("calendar unavailable"))

    def create_event(self, event: dict) -> str:
        self._check("create calendar event")
        self._id += 1
        event_id = f"evt{self._id}"
        self.events[event_id] = event
        self.calls.append(("create", event_id))
        return event_id

    def update_event(self, event_id: str, event: dict) -> None:
        self._check("update calendar event")
        self.events[event_id] = event
        self.calls.append(("update", event_id))

    def delete_event(self, event_id: str) -> None:
        self._check("delete calendar event")
        self.events.pop(event_id, None)
        self.calls.append(("delete", event_id))


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0)


@pytest.fixture
def employees() -> InMemoryEmployees:
    repo = InMemoryEmployees()
    repo.add("Maria Santos", salary_type=SalaryType.MONTHLY, salary_rate="16000")
    repo.add("Jose Reyes", salary_type=SalaryType.DAILY, salary_rate="500")
    return repo


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def payrolls() -> InMemoryPayrolls:
    return InMemoryPayrolls()


@pytest.fixture
def projects() -> InMemoryProjects:
    return InMemoryProjects()


@pytest.fixture
def tasks() -> InMemoryTasks:
    return InMemoryTasks()


@pytest.fixture
def appointments() -> InMemoryAppointments:
    return InMemoryAppointments()


@pytest.fixture
def calendar() -> FakeCalendar:
    return FakeCalendar()
