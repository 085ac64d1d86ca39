from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_hhmm
from ..common.validators import optional_text, require_date, require_enum, require_non_empty
from ..core.enums import AppointmentStatus
from ..core.exceptions import ExternalServiceError, InvalidTransition, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..integrations.google_calendar import CalendarClient, build_event
from .model import Appointment, AppointmentInput, AppointmentSaveResult
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)

# Statuses a direct edit may set. Completed/Cancelled only via complete()/cancel().
EDITABLE_STATUSES = (
    AppointmentStatus.ACTIVE,
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.RESCHEDULED,
)


class AppointmentService:
    """Appointment CRUD plus the status state machine and calendar sync.

    New appointments start Active. `complete` and `cancel` are the only
    system transitions and are allowed from Active only; Completed and
    Cancelled are terminal and reject further edits.
    """

    def __init__(
        self,
        appointments: AppointmentRepository,
        employees: EmployeeRepository,
        *,
        calendar: Optional[CalendarClient] = None,
        calendar_timezone: str = "UTC",
    ):
        self._appointments = appointments
        self._employees = employees
        self._calendar = calendar
        self._calendar_timezone = calendar_timezone

    @property
    def calendar_enabled(self) -> bool:
        return self._calendar is not None

    # -------- Reads --------
    def get(self, appointment_id: int) -> Appointment:
        a = self._appointments.get_by_id(int(appointment_id))
        if not a:
            raise NotFoundError("Appointment not found")
        return a

    def list_all(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[AppointmentStatus] = None,
    ) -> Sequence[Appointment]:
        return self._appointments.list_all(employee_id=employee_id, status=status)

    # -------- Mutations --------
    def parse_input(self, form: Mapping[str, Any]) -> AppointmentInput:
        raw_time = form.get("appointment_time")
        if not raw_time or not str(raw_time).strip():
            raise ValidationError("Appointment time is required")
        try:
            at_time = parse_hhmm(str(raw_time))
        except ValueError:
            raise ValidationError("Appointment time must be HH:MM")

        try:
            employee_id = int(form.get("assigned_employee") or 0)
        except (TypeError, ValueError):
            raise ValidationError("Assigned employee is invalid")
        if not employee_id or not self._employees.get_by_id(employee_id):
            raise ValidationError("Assigned employee does not exist")

        return AppointmentInput(
            appointment_name=require_non_empty(form.get("appointment_name"), "Appointment name"),
            appointment_date=require_date(form.get("appointment_date"), "Appointment date"),
            appointment_time=at_time,
            assigned_employee=employee_id,
            appointment_info=optional_text(form.get("appointment_info")),
        )

    def create(self, form: Mapping[str, Any], *, sync_to_calendar: bool = False) -> AppointmentSaveResult:
        data = self.parse_input(form)
        appointment_id = self._appointments.create(data, status=AppointmentStatus.ACTIVE)
        logger.info("created appointment %s for employee %s", appointment_id, data.assigned_employee)

        if not sync_to_calendar:
            return AppointmentSaveResult(appointment_id=appointment_id)
        return self._sync_saved(appointment_id)

    def update(self, appointment_id: int, form: Mapping[str, Any]) -> AppointmentSaveResult:
        current = self.get(appointment_id)
        if current.appointment_status.is_terminal:
            raise InvalidTransition(f"A {current.appointment_status.value} appointment cannot be edited")

        raw_status = form.get("appointment_status")
        status = (
            require_enum(raw_status, AppointmentStatus, "Status") if raw_status else current.appointment_status
        )
        if status not in EDITABLE_STATUSES:
            raise InvalidTransition(f"Use complete or cancel to mark an appointment {status.value}")

        data = self.parse_input(form)
        if not self._appointments.update_open(int(appointment_id), data, status=status):
            latest = self.get(appointment_id)
            raise InvalidTransition(f"A {latest.appointment_status.value} appointment cannot be edited")

        if not current.is_synced:
            return AppointmentSaveResult(appointment_id=int(appointment_id))

        event_id = str(current.google_calendar_event_id)
        try:
            self._require_calendar().update_event(event_id, self._event_for(self.get(appointment_id)))
        except ExternalServiceError as e:
            logger.warning("appointment %s saved but calendar update failed: %s", appointment_id, e)
            return AppointmentSaveResult(appointment_id=int(appointment_id), calendar_event_id=event_id, calendar_error=e)
        return AppointmentSaveResult(appointment_id=int(appointment_id), calendar_event_id=event_id)

    def _transition(self, appointment_id: int, to_status: AppointmentStatus) -> None:
        current = self.get(appointment_id)
        if current.appointment_status != AppointmentStatus.ACTIVE:
            raise InvalidTransition(
                f"Only Active appointments can be marked {to_status.value} "
                f"(current: {current.appointment_status.value})"
            )
        if not self._appointments.transition(
            int(appointment_id), from_status=AppointmentStatus.ACTIVE, to_status=to_status
        ):
            raise InvalidTransition("Appointment status changed concurrently; reload and retry")
        logger.info("appointment %s -> %s", appointment_id, to_status.value)

    def complete(self, appointment_id: int) -> None:
        self._transition(appointment_id, AppointmentStatus.COMPLETED)

    def cancel(self, appointment_id: int) -> None:
        self._transition(appointment_id, AppointmentStatus.CANCELLED)

    def delete(self, appointment_id: int) -> AppointmentSaveResult:
        current = self.get(appointment_id)
        if not self._appointments.delete(int(appointment_id)):
            raise NotFoundError("Appointment not found")

        if not current.is_synced or self._calendar is None:
            return AppointmentSaveResult(appointment_id=int(appointment_id))

        event_id = str(current.google_calendar_event_id)
        try:
            self._calendar.delete_event(event_id)
        except ExternalServiceError as e:
            logger.warning("appointment %s deleted but calendar event %s was not: %s", appointment_id, event_id, e)
            return AppointmentSaveResult(appointment_id=int(appointment_id), calendar_event_id=event_id, calendar_error=e)
        return AppointmentSaveResult(appointment_id=int(appointment_id))

    # -------- Calendar --------
    def sync_to_calendar(self, appointment_id: int) -> str:
        """Push an existing appointment to the calendar and store the event id."""
        appointment = self.get(appointment_id)
        calendar = self._require_calendar()
        event = self._event_for(appointment)

        if appointment.is_synced:
            event_id = str(appointment.google_calendar_event_id)
            calendar.update_event(event_id, event)
            return event_id

        event_id = calendar.create_event(event)
        self._appointments.set_calendar_event(appointment.appointment_id, event_id)
        return event_id

    def _sync_saved(self, appointment_id: int) -> AppointmentSaveResult:
        try:
            event_id = self.sync_to_calendar(appointment_id)
        except ExternalServiceError as e:
            logger.warning("appointment %s saved but calendar sync failed: %s", appointment_id, e)
            return AppointmentSaveResult(appointment_id=appointment_id, calendar_error=e)
        return AppointmentSaveResult(appointment_id=appointment_id, calendar_event_id=event_id)

    def _require_calendar(self) -> CalendarClient:
        if self._calendar is None:
            raise ExternalServiceError("calendar sync", RuntimeError("calendar integration is not configured"))
        return self._calendar

    def _event_for(self, appointment: Appointment) -> dict:
        emp = self._employees.get_by_id(appointment.assigned_employee)
        return build_event(
            summary=appointment.appointment_name,
            on_date=appointment.appointment_date,
            at_time=appointment.appointment_time,
            employee_name=emp.name if emp else "",
            employee_email=emp.email if emp else None,
            description=appointment.appointment_info,
            timezone=self._calendar_timezone,
        )
