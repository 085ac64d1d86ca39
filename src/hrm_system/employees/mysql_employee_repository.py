from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import EmploymentStatus, SalaryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee, EmployeeInput
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, name, address, contact_number, email, date_hired,
    employment_status, salary_rate, salary_type, created_at
"""


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        name=r["name"],
        address=r["address"],
        contact_number=r["contact_number"],
        email=r["email"],
        date_hired=r["date_hired"],
        employment_status=EmploymentStatus(r["employment_status"]),
        salary_rate=Decimal(r["salary_rate"]),
        salary_type=SalaryType(r["salary_type"]),
        created_at=r.get("created_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory, operation="load employee") as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def list_all(self, *, status: Optional[EmploymentStatus] = None) -> Sequence[Employee]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("employment_status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory, operation="list employees") as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE {' AND '.join(clauses)} ORDER BY name ASC",
                tuple(params),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def create(self, data: EmployeeInput) -> int:
        with db_cursor(self._conn_factory, operation="create employee") as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    name, address, contact_number, email, date_hired,
                    employment_status, salary_rate, salary_type
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    data.name,
                    data.address,
                    data.contact_number,
                    data.email,
                    data.date_hired,
                    data.employment_status.value,
                    data.salary_rate,
                    data.salary_type.value,
                ),
            )
            return int(cur.lastrowid)

    def update(self, employee_id: int, data: EmployeeInput) -> bool:
        with db_cursor(self._conn_factory, operation="update employee") as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET name=%s, address=%s, contact_number=%s, email=%s, date_hired=%s,
                    employment_status=%s, salary_rate=%s, salary_type=%s
                WHERE employee_id=%s
                """,
                (
                    data.name,
                    data.address,
                    data.contact_number,
                    data.email,
                    data.date_hired,
                    data.employment_status.value,
                    data.salary_rate,
                    data.salary_type.value,
                    int(employee_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, employee_id: int) -> bool:
        """Delete an employee and their dependent rows in one transaction.

        Attendance goes first: it references both the employee and their
        payrolls, and attendance.payroll_id is ON DELETE RESTRICT.
        """
        with db_cursor(self._conn_factory, operation="delete employee") as (_, cur):
            cur.execute("DELETE FROM attendance WHERE employee_id=%s", (int(employee_id),))
            cur.execute("DELETE FROM payroll WHERE employee_id=%s", (int(employee_id),))
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0
