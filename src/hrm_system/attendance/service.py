from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import month_bounds
from ..common.validators import require_date, require_decimal, require_enum
from ..core.constants import MAX_HOURS_PER_DAY
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    DuplicateRecordError,
    NotFoundError,
    PaidRecordImmutable,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from .model import (
    AttendanceInput,
    AttendanceRecord,
    EmployeeAttendanceSummary,
    MonthlyAttendanceSummary,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Attendance rows split into unpaid (editable) and paid (frozen) partitions.

    Rows linked to a payroll are immutable: every mutating method checks the
    current row first, and the repository repeats the check in its SQL so a
    row that becomes paid mid-request is still protected.
    """

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    # -------- Reads --------
    def unpaid_for(self, employee_id: int) -> list[AttendanceRecord]:
        rows = self._attendance.list_unpaid(employee_id=int(employee_id))
        return sorted(rows, key=lambda r: r.work_date)

    def list_unpaid(self) -> Sequence[AttendanceRecord]:
        return self._attendance.list_unpaid()

    def check_duplicate(
        self,
        employee_id: int,
        work_date: date,
        *,
        editing_id: Optional[int] = None,
    ) -> Optional[AttendanceRecord]:
        existing = self._attendance.get_for_employee_and_date(int(employee_id), work_date)
        if existing is None:
            return None
        if editing_id is not None and existing.attendance_id == int(editing_id):
            return None
        return existing

    def history_for(self, employee_id: int) -> list[AttendanceRecord]:
        """All rows for one employee, newest first, paid and unpaid."""
        rows = self._attendance.list_for_employee(int(employee_id))
        return sorted(rows, key=lambda r: r.work_date, reverse=True)

    def employee_summaries(self) -> list[EmployeeAttendanceSummary]:
        by_employee: dict[int, list[AttendanceRecord]] = defaultdict(list)
        for r in self._attendance.list_between():
            by_employee[r.employee_id].append(r)

        out: list[EmployeeAttendanceSummary] = []
        for emp in self._employees.list_all():
            rows = by_employee.get(emp.employee_id, [])
            out.append(
                EmployeeAttendanceSummary(
                    employee_id=emp.employee_id,
                    name=emp.name,
                    present_count=sum(1 for r in rows if r.status == AttendanceStatus.PRESENT),
                    absent_count=sum(1 for r in rows if r.status == AttendanceStatus.ABSENT),
                    total_hours=sum((r.hours_worked for r in rows), Decimal("0")),
                    unpaid_count=sum(1 for r in rows if not r.is_paid),
                )
            )
        return out

    def monthly_summary(self, employee_id: int, *, year: int, month: int) -> MonthlyAttendanceSummary:
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        start, end = month_bounds(int(year), int(month))
        rows = list(self._attendance.list_between(start_date=start, end_date=end, employee_id=int(employee_id)))

        return MonthlyAttendanceSummary(
            employee_id=int(employee_id),
            year=int(year),
            month=int(month),
            present_days=sum(1 for r in rows if r.status == AttendanceStatus.PRESENT),
            absent_days=sum(1 for r in rows if r.status == AttendanceStatus.ABSENT),
            total_hours=sum((r.hours_worked for r in rows), Decimal("0")),
            records=rows,
        )

    # -------- Mutations --------
    def parse_input(self, form: Mapping[str, Any]) -> AttendanceInput:
        raw_employee = form.get("employee_id")
        if raw_employee in (None, ""):
            raise ValidationError("Employee is required")
        try:
            employee_id = int(raw_employee)
        except (TypeError, ValueError):
            raise ValidationError("Employee is invalid")

        work_date = require_date(form.get("work_date") or form.get("date"), "Date")
        status = require_enum(form.get("status"), AttendanceStatus, "Status")

        if status == AttendanceStatus.ABSENT:
            hours = Decimal("0")
        else:
            hours = require_decimal(form.get("hours_worked"), "Hours worked")
            if hours < 0 or hours > MAX_HOURS_PER_DAY:
                raise ValidationError("Please enter a valid number of hours (0-24)")

        if not self._employees.get_by_id(employee_id):
            raise ValidationError("Employee does not exist")

        return AttendanceInput(employee_id=employee_id, work_date=work_date, status=status, hours_worked=hours)

    def record(self, form: Mapping[str, Any]) -> int:
        data = self.parse_input(form)

        existing = self.check_duplicate(data.employee_id, data.work_date)
        if existing:
            raise DuplicateRecordError(
                f"Attendance already recorded for this date ({existing.status.value}, "
                f"{existing.hours_worked} hours)"
            )

        attendance_id = self._attendance.create(data)
        logger.debug("recorded attendance %s for employee %s on %s", attendance_id, data.employee_id, data.work_date)
        return attendance_id

    def _get_unpaid(self, attendance_id: int) -> AttendanceRecord:
        rec = self._attendance.get_by_id(int(attendance_id))
        if not rec:
            raise NotFoundError("Attendance record not found")
        if rec.is_paid:
            raise PaidRecordImmutable("Attendance is already included in a payroll and cannot be changed")
        return rec

    def _raise_after_failed_write(self, attendance_id: int) -> None:
        rec = self._attendance.get_by_id(int(attendance_id))
        if rec is None:
            raise NotFoundError("Attendance record not found")
        if rec.is_paid:
            raise PaidRecordImmutable("Attendance was included in a payroll while being edited")
        raise NotFoundError("Attendance record could not be updated")

    def edit(self, attendance_id: int, form: Mapping[str, Any]) -> None:
        self._get_unpaid(attendance_id)
        data = self.parse_input(form)

        existing = self.check_duplicate(data.employee_id, data.work_date, editing_id=int(attendance_id))
        if existing:
            raise DuplicateRecordError("Attendance already exists for this employee on this date")

        if not self._attendance.update_unpaid(int(attendance_id), data):
            self._raise_after_failed_write(attendance_id)

    def delete(self, attendance_id: int) -> None:
        self._get_unpaid(attendance_id)
        if not self._attendance.delete_unpaid(int(attendance_id)):
            self._raise_after_failed_write(attendance_id)
