from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AppointmentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Appointment, AppointmentInput
from .repository import AppointmentRepository

_COLUMNS = """
    appointment_id, appointment_name, appointment_date, appointment_time, assigned_employee,
    appointment_status, appointment_info, google_calendar_event_id, created_at, updated_at
"""

_TERMINAL = tuple(s.value for s in AppointmentStatus if s.is_terminal)


def _row_to_appointment(r: dict) -> Appointment:
    return Appointment(
        appointment_id=int(r["appointment_id"]),
        appointment_name=r["appointment_name"],
        appointment_date=r["appointment_date"],
        appointment_time=normalize_mysql_time(r["appointment_time"]),
        assigned_employee=int(r["assigned_employee"]),
        appointment_status=AppointmentStatus(r["appointment_status"]),
        appointment_info=r.get("appointment_info"),
        google_calendar_event_id=r.get("google_calendar_event_id"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAppointmentRepository(AppointmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, appointment_id: int) -> Optional[Appointment]:
        with db_cursor(self._conn_factory, operation="load appointment") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM appointments WHERE appointment_id=%s", (int(appointment_id),))
            r = fetchone(cur)
            return _row_to_appointment(r) if r else None

    def list_all(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[AppointmentStatus] = None,
    ) -> Sequence[Appointment]:
        clauses = ["1=1"]
        params: list[object] = []
        if employee_id is not None:
            clauses.append("assigned_employee=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("appointment_status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory, operation="list appointments") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM appointments
                WHERE {' AND '.join(clauses)}
                ORDER BY appointment_date ASC, appointment_time ASC, appointment_id ASC
                """,
                tuple(params),
            )
            return [_row_to_appointment(r) for r in fetchall(cur)]

    def create(self, data: AppointmentInput, *, status: AppointmentStatus) -> int:
        with db_cursor(self._conn_factory, operation="create appointment") as (_, cur):
            cur.execute(
                """
                INSERT INTO appointments(
                    appointment_name, appointment_date, appointment_time,
                    assigned_employee, appointment_status, appointment_info
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    data.appointment_name,
                    data.appointment_date,
                    data.appointment_time,
                    int(data.assigned_employee),
                    status.value,
                    data.appointment_info,
                ),
            )
            return int(cur.lastrowid)

    def update_open(self, appointment_id: int, data: AppointmentInput, *, status: AppointmentStatus) -> bool:
        with db_cursor(self._conn_factory, operation="update appointment") as (_, cur):
            cur.execute(
                """
                UPDATE appointments
                SET appointment_name=%s, appointment_date=%s, appointment_time=%s,
                    assigned_employee=%s, appointment_status=%s, appointment_info=%s
                WHERE appointment_id=%s AND appointment_status NOT IN (%s,%s)
                """,
                (
                    data.appointment_name,
                    data.appointment_date,
                    data.appointment_time,
                    int(data.assigned_employee),
                    status.value,
                    data.appointment_info,
                    int(appointment_id),
                )
                + _TERMINAL,
            )
            return cur.rowcount > 0

    def transition(
        self,
        appointment_id: int,
        *,
        from_status: AppointmentStatus,
        to_status: AppointmentStatus,
    ) -> bool:
        with db_cursor(self._conn_factory, operation="change appointment status") as (_, cur):
            cur.execute(
                """
                UPDATE appointments SET appointment_status=%s
                WHERE appointment_id=%s AND appointment_status=%s
                """,
                (to_status.value, int(appointment_id), from_status.value),
            )
            return cur.rowcount > 0

    def set_calendar_event(self, appointment_id: int, event_id: Optional[str]) -> bool:
        with db_cursor(self._conn_factory, operation="store calendar event id") as (_, cur):
            cur.execute(
                "UPDATE appointments SET google_calendar_event_id=%s WHERE appointment_id=%s",
                (event_id, int(appointment_id)),
            )
            return cur.rowcount > 0

    def delete(self, appointment_id: int) -> bool:
        with db_cursor(self._conn_factory, operation="delete appointment") as (_, cur):
            cur.execute("DELETE FROM appointments WHERE appointment_id=%s", (int(appointment_id),))
            return cur.rowcount > 0
