from __future__ import annotations

from datetime import datetime
from typing import ContextManager, Optional, Protocol, Sequence

from .model import Payroll, PayrollTotals


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[Payroll]:
        """Payrolls of one employee, newest first."""

        raise NotImplementedError

    def list_all(self, *, since: Optional[datetime] = None) -> Sequence[Payroll]:
        """All payrolls (optionally generated on/after `since`), newest first."""

        raise NotImplementedError

    def create(self, *, employee_id: int, totals: PayrollTotals, generated_on: datetime) -> int:
        raise NotImplementedError

    def update_totals(self, payroll_id: int, totals: PayrollTotals) -> bool:
        raise NotImplementedError

    def delete(self, payroll_id: int) -> bool:
        raise NotImplementedError

    def generation_lock(self) -> ContextManager[None]:
        """Store-wide mutual exclusion for generating or deleting payrolls."""

        raise NotImplementedError
