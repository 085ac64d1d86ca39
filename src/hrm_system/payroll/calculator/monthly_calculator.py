from __future__ import annotations

from decimal import Decimal
from typing import Any

from ...core.constants import HOURS_PER_MONTH
from .base import PayCalculator, non_negative, to_cents


class MonthlyPayCalculator(PayCalculator):
    """Monthly salary paid by the hour: hourly rate = salary_rate / 160."""

    def hourly_rate(self, salary_rate: Any) -> Decimal:
        return self._rate(salary_rate) / HOURS_PER_MONTH

    def net_pay(self, *, salary_rate: Any, total_working_days: Any = 0, total_hours: Any = 0) -> Decimal:
        hours = non_negative(total_hours, "Total hours")
        return to_cents(hours * self.hourly_rate(salary_rate))
