from __future__ import annotations

from decimal import Decimal
from typing import Any

from .base import PayCalculator, non_negative, to_cents


class DailyPayCalculator(PayCalculator):
    """Daily wage: every Present day earns one salary_rate."""

    def net_pay(self, *, salary_rate: Any, total_working_days: Any = 0, total_hours: Any = 0) -> Decimal:
        days = non_negative(total_working_days, "Total working days")
        return to_cents(days * self._rate(salary_rate))
