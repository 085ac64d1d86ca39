from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceInput, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[AttendanceRecord]:
        """All rows for one employee, newest first."""

        raise NotImplementedError

    def list_between(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Rows in an inclusive date range (open ends allowed), date ascending."""

        raise NotImplementedError

    def list_unpaid(self, *, employee_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        """Rows with payroll_id IS NULL, date ascending."""

        raise NotImplementedError

    def list_for_payroll(self, payroll_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(self, data: AttendanceInput) -> int:
        """Insert a row; raises DuplicateRecordError on (employee, date) conflicts."""

        raise NotImplementedError

    def update_unpaid(self, attendance_id: int, data: AttendanceInput) -> bool:
        """Update a row only while it is unpaid; False when nothing matched."""

        raise NotImplementedError

    def delete_unpaid(self, attendance_id: int) -> bool:
        """Delete a row only while it is unpaid; False when nothing matched."""

        raise NotImplementedError

    def link_to_payroll(self, rows: Sequence[AttendanceRecord], payroll_id: int) -> int:
        """Set payroll_id on rows still unpaid and unchanged since they were read.

        A row matches only while its employee, status and hours equal the
        given record. Returns the number of rows linked.
        """

        raise NotImplementedError

    def unlink_payroll(self, payroll_id: int) -> int:
        """Reset payroll_id to NULL for every row of a payroll; returns rows unlinked."""

        raise NotImplementedError
