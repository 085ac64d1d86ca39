from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import EmploymentStatus, SalaryType


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee and the salary configuration used for net pay."""

    employee_id: int
    name: str
    address: str
    contact_number: str
    email: str
    date_hired: date
    employment_status: EmploymentStatus
    salary_rate: Decimal
    salary_type: SalaryType
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class EmployeeInput:
    """Validated fields for create/update."""

    name: str
    address: str
    contact_number: str
    email: str
    date_hired: date
    employment_status: EmploymentStatus
    salary_rate: Decimal
    salary_type: SalaryType
