from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_decimal, require_non_negative_int
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    DomainError,
    EmptyBatchError,
    LinkFailure,
    NotFoundError,
    PartialLinkFailure,
    ValidationError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .calculator.base import to_cents
from .calculator.factory import PayCalculatorFactory
from .model import (
    EmployeePayrollSummary,
    GenerationResult,
    Payroll,
    PayrollTotals,
    PayrollWithPay,
)
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


def partition_by_employee(rows: Sequence[AttendanceRecord]) -> "OrderedDict[int, list[AttendanceRecord]]":
    """Group attendance rows by employee, keeping first-seen employee order."""
    groups: "OrderedDict[int, list[AttendanceRecord]]" = OrderedDict()
    for r in rows:
        groups.setdefault(r.employee_id, []).append(r)
    return groups


def aggregate(rows: Sequence[AttendanceRecord]) -> PayrollTotals:
    return PayrollTotals(
        total_working_days=sum(1 for r in rows if r.status == AttendanceStatus.PRESENT),
        total_absent_days=sum(1 for r in rows if r.status == AttendanceStatus.ABSENT),
        total_hours=sum((r.hours_worked for r in rows), Decimal("0")),
    )


class PayrollService:
    """Generates payroll from unpaid attendance and manages payroll rows.

    Generation and deletion run under two locks: a process-local lock and the
    repository's store-wide lock, so concurrent callers are serialized and the
    second one sees the attendance already linked by the first.
    """

    _local_lock = threading.Lock()

    def __init__(
        self,
        payrolls: PayrollRepository,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        calculators: Optional[PayCalculatorFactory] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payrolls = payrolls
        self._attendance = attendance
        self._employees = employees
        self._calculators = calculators or PayCalculatorFactory()
        self._clock = clock

    # -------- Net pay --------
    def net_pay_for(self, payroll: Payroll, employee: Employee) -> Decimal:
        calculator = self._calculators.for_salary_type(employee.salary_type)
        return calculator.net_pay(
            salary_rate=employee.salary_rate,
            total_working_days=payroll.total_working_days,
            total_hours=payroll.total_hours,
        )

    # -------- Generation --------
    def generate(self) -> GenerationResult:
        with self._local_lock, self._payrolls.generation_lock():
            return self._generate_locked()

    def _generate_locked(self) -> GenerationResult:
        unpaid = self._attendance.list_unpaid()
        if not unpaid:
            raise EmptyBatchError(
                "No unpaid attendance records found. All attendance has already been processed for payroll."
            )

        generated_on = self._clock()
        created: list[int] = []
        failures: list[LinkFailure] = []
        linked_total = 0

        for employee_id, rows in partition_by_employee(unpaid).items():
            totals = aggregate(rows)
            try:
                payroll_id = self._payrolls.create(employee_id=employee_id, totals=totals, generated_on=generated_on)
            except DomainError:
                logger.error(
                    "creating payroll for employee %s failed after %s payroll(s) were created", employee_id, len(created)
                )
                raise

            try:
                linked = self._attendance.link_to_payroll(rows, payroll_id)
                reason = ""
            except DomainError as e:
                linked, reason = -1, str(e)

            if linked == len(rows):
                created.append(payroll_id)
                linked_total += linked
                logger.info(
                    "payroll %s: employee %s, %s day(s) present, %s absent, %s hour(s)",
                    payroll_id,
                    employee_id,
                    totals.total_working_days,
                    totals.total_absent_days,
                    totals.total_hours,
                )
                continue

            logger.error(
                "payroll %s: linked %s of %s attendance row(s) for employee %s; rolling back",
                payroll_id,
                max(linked, 0),
                len(rows),
                employee_id,
            )
            failures.append(
                LinkFailure(
                    employee_id=employee_id,
                    payroll_id=payroll_id,
                    expected=len(rows),
                    linked=max(linked, 0),
                    compensated=self._compensate(payroll_id),
                    reason=reason or "attendance changed during generation",
                )
            )

        if failures:
            raise PartialLinkFailure(created_payroll_ids=created, failures=failures)

        return GenerationResult(
            payroll_ids=created,
            employees_processed=len(created),
            attendance_linked=linked_total,
            generated_on=generated_on,
            message=f"Payroll has been generated for {len(created)} employee(s).",
        )

    def _compensate(self, payroll_id: int) -> bool:
        """Undo a half-linked payroll: release its attendance and drop the row."""
        try:
            self._attendance.unlink_payroll(payroll_id)
            self._payrolls.delete(payroll_id)
        except DomainError:
            logger.exception("compensation for payroll %s failed; manual repair needed", payroll_id)
            return False
        return True

    # -------- Management --------
    def get(self, payroll_id: int) -> Payroll:
        p = self._payrolls.get_by_id(int(payroll_id))
        if not p:
            raise NotFoundError("Payroll not found")
        return p

    def delete_payroll(self, payroll_id: int) -> int:
        """Delete a payroll and return its attendance rows to the unpaid set."""
        with self._local_lock, self._payrolls.generation_lock():
            self.get(payroll_id)
            linked_rows = list(self._attendance.list_for_payroll(int(payroll_id)))
            unlinked = self._attendance.unlink_payroll(int(payroll_id))

            try:
                deleted = self._payrolls.delete(int(payroll_id))
            except DomainError:
                self._attendance.link_to_payroll(linked_rows, int(payroll_id))
                raise
            if not deleted:
                self._attendance.link_to_payroll(linked_rows, int(payroll_id))
                raise NotFoundError("Payroll not found")

        logger.info("deleted payroll %s; %s attendance row(s) are unpaid again", payroll_id, unlinked)
        return unlinked

    @staticmethod
    def parse_totals(form: Mapping[str, Any]) -> PayrollTotals:
        hours = require_decimal(form.get("total_hours"), "Total hours")
        if hours < 0:
            raise ValidationError("Total hours cannot be negative")
        return PayrollTotals(
            total_working_days=require_non_negative_int(form.get("total_working_days"), "Total working days"),
            total_absent_days=require_non_negative_int(form.get("total_absent_days"), "Total absent days"),
            total_hours=hours,
        )

    def update_payroll(self, payroll_id: int, form: Mapping[str, Any]) -> None:
        totals = self.parse_totals(form)
        self.get(payroll_id)
        if not self._payrolls.update_totals(int(payroll_id), totals):
            raise NotFoundError("Payroll not found")

    def payrolls_for(self, employee_id: int) -> list[PayrollWithPay]:
        emp = self._employees.get_by_id(int(employee_id))
        if not emp:
            raise NotFoundError("Employee not found")
        return [
            PayrollWithPay(payroll=p, employee_name=emp.name, net_pay=self.net_pay_for(p, emp))
            for p in self._payrolls.list_for_employee(emp.employee_id)
        ]

    def employee_summaries(self) -> list[EmployeePayrollSummary]:
        by_employee: dict[int, list[Payroll]] = {}
        for p in self._payrolls.list_all():
            by_employee.setdefault(p.employee_id, []).append(p)

        out: list[EmployeePayrollSummary] = []
        for emp in self._employees.list_all():
            rows = by_employee.get(emp.employee_id, [])
            total_hours = sum((p.total_hours for p in rows), Decimal("0"))
            out.append(
                EmployeePayrollSummary(
                    employee_id=emp.employee_id,
                    name=emp.name,
                    salary_rate=emp.salary_rate,
                    salary_type=emp.salary_type.value,
                    total_payrolls=len(rows),
                    total_earnings=sum((self.net_pay_for(p, emp) for p in rows), Decimal("0")),
                    avg_hours=to_cents(total_hours / len(rows)) if rows else Decimal("0"),
                    latest_payroll_hours=rows[0].total_hours if rows else Decimal("0"),
                )
            )
        return out
