from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import AppointmentStatus
from ..core.exceptions import ExternalServiceError


@dataclass(frozen=True)
class Appointment:
    appointment_id: int
    appointment_name: str
    appointment_date: date
    appointment_time: time
    assigned_employee: int
    appointment_status: AppointmentStatus
    appointment_info: Optional[str]
    google_calendar_event_id: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_synced(self) -> bool:
        return bool(self.google_calendar_event_id)


@dataclass(frozen=True)
class AppointmentInput:
    appointment_name: str
    appointment_date: date
    appointment_time: time
    assigned_employee: int
    appointment_info: Optional[str]


@dataclass(frozen=True)
class AppointmentSaveResult:
    """Outcome of a write whose calendar side effect may fail independently.

    The appointment row is always saved when this is returned;
    `calendar_error` is set when the calendar call failed afterwards.
    """

    appointment_id: int
    calendar_event_id: Optional[str] = None
    calendar_error: Optional[ExternalServiceError] = None

    @property
    def calendar_synced(self) -> bool:
        return self.calendar_error is None and bool(self.calendar_event_id)
