from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Payroll:
    """Domain entity: aggregates over one batch of an employee's attendance."""

    payroll_id: int
    employee_id: int
    total_working_days: int
    total_absent_days: int
    total_hours: Decimal
    generated_on: datetime


@dataclass(frozen=True)
class PayrollTotals:
    total_working_days: int
    total_absent_days: int
    total_hours: Decimal


@dataclass(frozen=True)
class PayrollWithPay:
    """Read-model: a payroll row with its derived (never stored) net pay."""

    payroll: Payroll
    employee_name: str
    net_pay: Decimal


@dataclass(frozen=True)
class EmployeePayrollSummary:
    employee_id: int
    name: str
    salary_rate: Decimal
    salary_type: str
    total_payrolls: int
    total_earnings: Decimal
    avg_hours: Decimal
    latest_payroll_hours: Decimal


@dataclass(frozen=True)
class GenerationResult:
    payroll_ids: list[int]
    employees_processed: int
    attendance_linked: int
    generated_on: datetime
    message: Optional[str] = None
