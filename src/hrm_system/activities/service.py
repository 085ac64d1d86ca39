from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..core.constants import DEFAULT_ACTIVITY_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..employees.repository import EmployeeRepository
from ..payroll.repository import PayrollRepository
from ..tasks.repository import TaskRepository
from .model import FAMILIES, Activity, ActivityKind


class ActivityService:
    """Merged, newest-first feed over employees, tasks, payrolls and attendance."""

    def __init__(
        self,
        employees: EmployeeRepository,
        tasks: TaskRepository,
        payrolls: PayrollRepository,
        attendance: AttendanceRepository,
    ):
        self._employees = employees
        self._tasks = tasks
        self._payrolls = payrolls
        self._attendance = attendance

    def _collect(self) -> list[Activity]:
        employees = list(self._employees.list_all())
        names = {e.employee_id: e.name for e in employees}
        out: list[Activity] = []

        for e in employees:
            out.append(
                Activity(
                    kind=ActivityKind.EMPLOYEE,
                    source_id=e.employee_id,
                    message=f"New employee {e.name} joined the company",
                    details=f"Email: {e.email} • Status: {e.employment_status.value}",
                    timestamp=e.created_at,
                )
            )

        for t in self._tasks.list_all():
            who = names.get(t.assigned_to, "Unknown")
            if t.is_completed:
                out.append(
                    Activity(
                        kind=ActivityKind.TASK_COMPLETED,
                        source_id=t.task_id,
                        message=f'Task "{t.task_name}" completed by {who}',
                        details="Project task" if t.project_id else "Standalone task",
                        timestamp=t.completed_at or t.task_created,
                    )
                )
            else:
                out.append(
                    Activity(
                        kind=ActivityKind.TASK_ASSIGNED,
                        source_id=t.task_id,
                        message=f'New task "{t.task_name}" assigned to {who}',
                        details=f"Deadline: {t.task_deadline.isoformat()}",
                        timestamp=t.task_created,
                    )
                )

        for p in self._payrolls.list_all():
            out.append(
                Activity(
                    kind=ActivityKind.PAYROLL,
                    source_id=p.payroll_id,
                    message=f"Payroll generated for {names.get(p.employee_id, 'Unknown')}",
                    details=f"Working days: {p.total_working_days} • Hours: {p.total_hours}",
                    timestamp=p.generated_on,
                )
            )

        for a in self._attendance.list_between():
            present = a.status == AttendanceStatus.PRESENT
            out.append(
                Activity(
                    kind=ActivityKind.ATTENDANCE_PRESENT if present else ActivityKind.ATTENDANCE_ABSENT,
                    source_id=a.attendance_id,
                    message=f"{names.get(a.employee_id, 'Unknown')} marked {a.status.value.lower()}",
                    details=f"Date: {a.work_date.isoformat()} • Hours: {a.hours_worked}",
                    timestamp=a.created_at,
                )
            )

        return out

    def feed(
        self,
        *,
        family: Optional[str] = None,
        search: str = "",
        limit: int = DEFAULT_ACTIVITY_LIMIT,
    ) -> list[Activity]:
        if family and family != "all" and family not in FAMILIES:
            raise ValidationError(f"Activity type must be one of: all, {', '.join(FAMILIES)}")

        items = self._collect()
        if family and family != "all":
            items = [a for a in items if a.kind.family == family]

        needle = (search or "").strip().lower()
        if needle:
            items = [a for a in items if needle in a.message.lower() or needle in a.details.lower()]

        items.sort(key=lambda a: a.timestamp or datetime.min, reverse=True)
        return items[: max(int(limit), 0)] if limit else items
