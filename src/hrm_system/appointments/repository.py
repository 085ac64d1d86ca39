from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AppointmentStatus
from .model import Appointment, AppointmentInput


class AppointmentRepository(Protocol):
    def get_by_id(self, appointment_id: int) -> Optional[Appointment]:
        raise NotImplementedError

    def list_all(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[AppointmentStatus] = None,
    ) -> Sequence[Appointment]:
        raise NotImplementedError

    def create(self, data: AppointmentInput, *, status: AppointmentStatus) -> int:
        raise NotImplementedError

    def update_open(self, appointment_id: int, data: AppointmentInput, *, status: AppointmentStatus) -> bool:
        """Update an appointment only while it is not in a terminal state."""

        raise NotImplementedError

    def transition(
        self,
        appointment_id: int,
        *,
        from_status: AppointmentStatus,
        to_status: AppointmentStatus,
    ) -> bool:
        """Compare-and-set the status; False when the current status differs."""

        raise NotImplementedError

    def set_calendar_event(self, appointment_id: int, event_id: Optional[str]) -> bool:
        raise NotImplementedError

    def delete(self, appointment_id: int) -> bool:
        raise NotImplementedError
