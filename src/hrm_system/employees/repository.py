from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EmploymentStatus
from .model import Employee, EmployeeInput


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self, *, status: Optional[EmploymentStatus] = None) -> Sequence[Employee]:
        """Employees ordered by name."""

        raise NotImplementedError

    def create(self, data: EmployeeInput) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, data: EmployeeInput) -> bool:
        raise NotImplementedError

    def delete(self, employee_id: int) -> bool:
        """Delete an employee; the store cascades to attendance/payroll/tasks/appointments."""

        raise NotImplementedError
