from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.constants import RECENT_PAYROLL_DAYS
from ..core.enums import AttendanceStatus, EmploymentStatus
from ..employees.repository import EmployeeRepository
from ..payroll.repository import PayrollRepository
from ..payroll.service import PayrollService
from ..projects.repository import ProjectRepository
from ..tasks.repository import TaskRepository


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int
    active_employees: int
    total_projects: int
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    overdue_tasks: int
    today_present: int
    today_absent: int
    attendance_rate: int
    recent_payrolls: int
    total_payroll_amount: Decimal


class DashboardService:
    def __init__(
        self,
        employees: EmployeeRepository,
        projects: ProjectRepository,
        tasks: TaskRepository,
        attendance: AttendanceRepository,
        payrolls: PayrollRepository,
        payroll_service: PayrollService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._projects = projects
        self._tasks = tasks
        self._attendance = attendance
        self._payrolls = payrolls
        self._payroll_service = payroll_service
        self._clock = clock

    def stats(self) -> DashboardStats:
        now = self._clock()
        today = now.date()

        employees = {e.employee_id: e for e in self._employees.list_all()}
        tasks = list(self._tasks.list_all())
        todays = list(self._attendance.list_between(start_date=today, end_date=today))
        present = sum(1 for a in todays if a.status == AttendanceStatus.PRESENT)
        absent = sum(1 for a in todays if a.status == AttendanceStatus.ABSENT)

        payrolls = list(self._payrolls.list_all())
        since = now - timedelta(days=RECENT_PAYROLL_DAYS)
        total_amount = sum(
            (
                self._payroll_service.net_pay_for(p, employees[p.employee_id])
                for p in payrolls
                if p.employee_id in employees
            ),
            Decimal("0"),
        )

        completed = sum(1 for t in tasks if t.is_completed)
        rate = Decimal(present * 100) / len(todays) if todays else Decimal("0")

        return DashboardStats(
            total_employees=len(employees),
            active_employees=sum(1 for e in employees.values() if e.employment_status == EmploymentStatus.ACTIVE),
            total_projects=len(self._projects.list_all()),
            total_tasks=len(tasks),
            completed_tasks=completed,
            pending_tasks=len(tasks) - completed,
            overdue_tasks=sum(1 for t in tasks if t.is_overdue(today)),
            today_present=present,
            today_absent=absent,
            attendance_rate=int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
            recent_payrolls=sum(1 for p in payrolls if p.generated_on >= since),
            total_payroll_amount=total_amount,
        )
