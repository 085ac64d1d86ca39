from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ContextManager, Optional, Sequence

from ..core.constants import DEFAULT_PAYROLL_LOCK_TIMEOUT, PAYROLL_LOCK_NAME
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, named_lock
from .model import Payroll, PayrollTotals
from .repository import PayrollRepository

_COLUMNS = "payroll_id, employee_id, total_working_days, total_absent_days, total_hours, generated_on"


def _row_to_payroll(r: dict) -> Payroll:
    return Payroll(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        total_working_days=int(r["total_working_days"]),
        total_absent_days=int(r["total_absent_days"]),
        total_hours=Decimal(r["total_hours"] or 0),
        generated_on=r["generated_on"],
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, lock_timeout: int = DEFAULT_PAYROLL_LOCK_TIMEOUT):
        self._conn_factory = conn_factory
        self._lock_timeout = int(lock_timeout)

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        with db_cursor(self._conn_factory, operation="load payroll") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _row_to_payroll(r) if r else None

    def list_for_employee(self, employee_id: int) -> Sequence[Payroll]:
        with db_cursor(self._conn_factory, operation="list payroll") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM payroll
                WHERE employee_id=%s
                ORDER BY generated_on DESC, payroll_id DESC
                """,
                (int(employee_id),),
            )
            return [_row_to_payroll(r) for r in fetchall(cur)]

    def list_all(self, *, since: Optional[datetime] = None) -> Sequence[Payroll]:
        clauses = ["1=1"]
        params: list[object] = []
        if since is not None:
            clauses.append("generated_on >= %s")
            params.append(since)

        with db_cursor(self._conn_factory, operation="list payroll") as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM payroll
                WHERE {' AND '.join(clauses)}
                ORDER BY generated_on DESC, payroll_id DESC
                """,
                tuple(params),
            )
            return [_row_to_payroll(r) for r in fetchall(cur)]

    def create(self, *, employee_id: int, totals: PayrollTotals, generated_on: datetime) -> int:
        with db_cursor(self._conn_factory, operation="create payroll") as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll(employee_id, total_working_days, total_absent_days, total_hours, generated_on)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(totals.total_working_days),
                    int(totals.total_absent_days),
                    totals.total_hours,
                    generated_on,
                ),
            )
            return int(cur.lastrowid)

    def update_totals(self, payroll_id: int, totals: PayrollTotals) -> bool:
        with db_cursor(self._conn_factory, operation="update payroll") as (_, cur):
            cur.execute(
                """
                UPDATE payroll
                SET total_working_days=%s, total_absent_days=%s, total_hours=%s
                WHERE payroll_id=%s
                """,
                (
                    int(totals.total_working_days),
                    int(totals.total_absent_days),
                    totals.total_hours,
                    int(payroll_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory, operation="delete payroll") as (_, cur):
            cur.execute("DELETE FROM payroll WHERE payroll_id=%s", (int(payroll_id),))
            return cur.rowcount > 0

    def generation_lock(self) -> ContextManager[None]:
        return named_lock(self._conn_factory, PAYROLL_LOCK_NAME, timeout=self._lock_timeout)
