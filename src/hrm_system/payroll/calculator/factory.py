from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from ...common.validators import require_enum
from ...core.enums import SalaryType
from ...core.exceptions import InvalidInput, ValidationError
from .base import PayCalculator
from .daily_calculator import DailyPayCalculator
from .monthly_calculator import MonthlyPayCalculator


@dataclass
class PayCalculatorFactory:
    """Factory Pattern: choose the pay strategy for a salary type."""

    _strategies: dict[SalaryType, PayCalculator] = field(
        default_factory=lambda: {
            SalaryType.MONTHLY: MonthlyPayCalculator(),
            SalaryType.DAILY: DailyPayCalculator(),
        }
    )

    def for_salary_type(self, salary_type: Any) -> PayCalculator:
        try:
            st = require_enum(salary_type, SalaryType, "Salary type")
        except ValidationError as e:
            raise InvalidInput(str(e)) from e
        return self._strategies[st]


_default_factory = PayCalculatorFactory()


def net_pay(
    salary_type: Any,
    salary_rate: Any,
    *,
    total_working_days: Any = 0,
    total_hours: Any = 0,
) -> Decimal:
    """Pure net-pay function: Daily uses working days, Monthly uses hours."""
    calculator = _default_factory.for_salary_type(salary_type)
    return calculator.net_pay(
        salary_rate=salary_rate,
        total_working_days=total_working_days,
        total_hours=total_hours,
    )
