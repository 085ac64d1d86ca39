from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per (employee, work_date)."""

    attendance_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    hours_worked: Decimal
    payroll_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_paid(self) -> bool:
        return self.payroll_id is not None


@dataclass(frozen=True)
class AttendanceInput:
    employee_id: int
    work_date: date
    status: AttendanceStatus
    hours_worked: Decimal


@dataclass(frozen=True)
class EmployeeAttendanceSummary:
    """Read-model: per-employee counters shown on the attendance overview."""

    employee_id: int
    name: str
    present_count: int
    absent_count: int
    total_hours: Decimal
    unpaid_count: int


@dataclass(frozen=True)
class MonthlyAttendanceSummary:
    employee_id: int
    year: int
    month: int
    present_days: int
    absent_days: int
    total_hours: Decimal
    records: list[AttendanceRecord] = field(default_factory=list)
