from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateRecordError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceInput, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, employee_id, work_date, status, hours_worked, payroll_id, created_at"


def _row_to_record(r: dict) -> AttendanceRecord:
    payroll_id = r.get("payroll_id")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        hours_worked=Decimal(r["hours_worked"] or 0),
        payroll_id=int(payroll_id) if payroll_id is not None else None,
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory, operation="load attendance") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory, operation="check attendance") as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_for_employee(self, employee_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory, operation="list attendance") as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE employee_id=%s ORDER BY work_date DESC",
                (int(employee_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_between(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory, operation="list attendance") as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE {where} ORDER BY work_date ASC, employee_id ASC",
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_unpaid(self, *, employee_id: Optional[int] = None) -> Sequence[AttendanceRecord]:
        clauses = ["payroll_id IS NULL"]
        params: list[object] = []
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        with db_cursor(self._conn_factory, operation="list unpaid attendance") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance
                WHERE {' AND '.join(clauses)}
                ORDER BY employee_id ASC, work_date ASC
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_payroll(self, payroll_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory, operation="list payroll attendance") as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE payroll_id=%s ORDER BY work_date ASC",
                (int(payroll_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def create(self, data: AttendanceInput) -> int:
        with db_cursor(self._conn_factory, operation="create attendance") as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance(employee_id, work_date, status, hours_worked)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(data.employee_id), data.work_date, data.status.value, data.hours_worked),
                )
            except mysql.connector.IntegrityError as e:
                if is_duplicate_key(e):
                    raise DuplicateRecordError("Attendance already exists for this employee on this date") from e
                raise
            return int(cur.lastrowid)

    def update_unpaid(self, attendance_id: int, data: AttendanceInput) -> bool:
        with db_cursor(self._conn_factory, operation="update attendance") as (_, cur):
            try:
                cur.execute(
                    """
                    UPDATE attendance
                    SET employee_id=%s, work_date=%s, status=%s, hours_worked=%s
                    WHERE attendance_id=%s AND payroll_id IS NULL
                    """,
                    (int(data.employee_id), data.work_date, data.status.value, data.hours_worked, int(attendance_id)),
                )
            except mysql.connector.IntegrityError as e:
                if is_duplicate_key(e):
                    raise DuplicateRecordError("Attendance already exists for this employee on this date") from e
                raise
            return cur.rowcount > 0

    def delete_unpaid(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory, operation="delete attendance") as (_, cur):
            cur.execute(
                "DELETE FROM attendance WHERE attendance_id=%s AND payroll_id IS NULL",
                (int(attendance_id),),
            )
            return cur.rowcount > 0

    def link_to_payroll(self, rows: Sequence[AttendanceRecord], payroll_id: int) -> int:
        if not rows:
            return 0
        # each row is matched on the values the payroll totals were built from
        match = " OR ".join(["(attendance_id=%s AND employee_id=%s AND status=%s AND hours_worked=%s)"] * len(rows))
        params: list[object] = [int(payroll_id)]
        for r in rows:
            params.extend([int(r.attendance_id), int(r.employee_id), r.status.value, r.hours_worked])

        with db_cursor(self._conn_factory, operation="link attendance to payroll") as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance SET payroll_id=%s
                WHERE payroll_id IS NULL AND ({match})
                """,
                tuple(params),
            )
            return int(cur.rowcount)

    def unlink_payroll(self, payroll_id: int) -> int:
        with db_cursor(self._conn_factory, operation="unlink payroll attendance") as (_, cur):
            cur.execute("UPDATE attendance SET payroll_id=NULL WHERE payroll_id=%s", (int(payroll_id),))
            return int(cur.rowcount)
