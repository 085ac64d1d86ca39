from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidInput(ValidationError):
    """Raised by pure calculators when a caller passes negative/NaN/non-numeric values."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class DuplicateRecordError(DomainError):
    """Raised when an attendance row already exists for the same employee and date."""


class PaidRecordImmutable(DomainError):
    """Raised on edit/delete of an attendance row already linked to a payroll."""


class InvalidTransition(DomainError):
    """Raised when an appointment status change is not allowed from its current state."""


class EmptyBatchError(DomainError):
    """Payroll generation found no unpaid attendance.

    This is an informational terminal state, not a failure.
    """


class PayrollGenerationInProgress(DomainError):
    """Another payroll generation holds the lock and did not release it in time."""


class ExternalServiceError(DomainError):
    """The record store, attachment storage or calendar service failed."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        message = f"{operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.operation = operation
        self.cause = cause


@dataclass(frozen=True)
class LinkFailure:
    employee_id: int
    payroll_id: int
    expected: int
    linked: int
    compensated: bool
    reason: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


class PartialLinkFailure(DomainError):
    """Payroll rows were created but some attendance rows could not be linked.

    `created_payroll_ids` are payrolls that are fully linked and stay in place.
    `failures` describes each employee whose batch failed to link, including
    whether the compensating rollback (unlink + delete payroll) succeeded.
    """

    def __init__(self, *, created_payroll_ids: Sequence[int], failures: Sequence[LinkFailure]):
        employees = ", ".join(str(f.employee_id) for f in failures)
        super().__init__(f"Could not link attendance to payroll for employee(s): {employees}")
        self.created_payroll_ids = list(created_payroll_ids)
        self.failures = list(failures)
