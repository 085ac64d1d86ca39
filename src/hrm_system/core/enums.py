from __future__ import annotations

from enum import Enum


class EmploymentStatus(str, Enum):
    """Employment state shown on the employee record."""

    ACTIVE = "Active"
    ON_LEAVE = "On Leave"
    TERMINATED = "Terminated"


class SalaryType(str, Enum):
    """How `salary_rate` is interpreted when computing net pay."""

    MONTHLY = "Monthly"
    DAILY = "Daily"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"


class AppointmentStatus(str, Enum):
    """Appointment lifecycle labels; Completed and Cancelled are terminal."""

    ACTIVE = "Active"
    CONFIRMED = "Confirmed"
    RESCHEDULED = "Rescheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED)
