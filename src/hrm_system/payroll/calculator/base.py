from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from ...common.validators import require_decimal
from ...core.constants import CENTS
from ...core.exceptions import InvalidInput, ValidationError


def non_negative(value: Any, field_name: str) -> Decimal:
    """Coerce a calculator input to Decimal; negative/NaN/non-numeric is a contract violation."""
    try:
        d = require_decimal(value, field_name)
    except ValidationError as e:
        raise InvalidInput(str(e)) from e
    if d < 0:
        raise InvalidInput(f"{field_name} cannot be negative")
    return d


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


class PayCalculator(ABC):
    """Calculator interface (Strategy Pattern for net pay per salary type)."""

    @abstractmethod
    def net_pay(self, *, salary_rate: Any, total_working_days: Any = 0, total_hours: Any = 0) -> Decimal:
        raise NotImplementedError

    @staticmethod
    def _rate(salary_rate: Any) -> Decimal:
        rate = non_negative(salary_rate, "Salary rate")
        if rate == 0:
            raise InvalidInput("Salary rate must be greater than 0")
        return rate
