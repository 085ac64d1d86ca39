from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import (
    require_date,
    require_decimal,
    require_email,
    require_enum,
    require_non_empty,
)
from ..core.enums import EmploymentStatus, SalaryType
from ..core.exceptions import NotFoundError, ValidationError
from .model import Employee, EmployeeInput
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    @staticmethod
    def parse_input(form: Mapping[str, Any]) -> EmployeeInput:
        salary_rate = require_decimal(form.get("salary_rate"), "Salary rate")
        if salary_rate <= 0:
            raise ValidationError("Salary rate must be greater than 0")

        return EmployeeInput(
            name=require_non_empty(form.get("name"), "Name"),
            address=require_non_empty(form.get("address"), "Address"),
            contact_number=require_non_empty(form.get("contact_number"), "Contact number"),
            email=require_email(form.get("email")),
            date_hired=require_date(form.get("date_hired"), "Date hired"),
            employment_status=require_enum(
                form.get("employment_status") or EmploymentStatus.ACTIVE.value,
                EmploymentStatus,
                "Employment status",
            ),
            salary_rate=salary_rate,
            salary_type=require_enum(form.get("salary_type"), SalaryType, "Salary type"),
        )

    def get(self, employee_id: int) -> Employee:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise NotFoundError("Employee not found")
        return emp

    def list_all(self, *, status: Optional[EmploymentStatus] = None) -> Sequence[Employee]:
        return self._employees.list_all(status=status)

    def search(self, term: str = "", *, status: Optional[EmploymentStatus] = None) -> list[Employee]:
        needle = (term or "").strip().lower()
        rows = self._employees.list_all(status=status)
        if not needle:
            return list(rows)
        return [e for e in rows if needle in e.name.lower() or needle in e.email.lower()]

    def create(self, form: Mapping[str, Any]) -> int:
        data = self.parse_input(form)
        employee_id = self._employees.create(data)
        logger.info("created employee %s (%s)", employee_id, data.name)
        return employee_id

    def update(self, employee_id: int, form: Mapping[str, Any]) -> None:
        self.get(employee_id)
        data = self.parse_input(form)
        if not self._employees.update(int(employee_id), data):
            raise NotFoundError("Employee not found")

    def delete(self, employee_id: int) -> None:
        if not self._employees.delete(int(employee_id)):
            raise NotFoundError("Employee not found")
        logger.info("deleted employee %s with dependent records", employee_id)
