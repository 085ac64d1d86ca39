from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from hrm_system.core.exceptions import ExternalServiceError, NotFoundError, ValidationError
from hrm_system.payroll.service import PayrollService


@pytest.fixture
def service(payrolls, attendance, employees, fixed_now):
    return PayrollService(payrolls, attendance, employees, clock=lambda: fixed_now)


def test_delete_payroll_returns_rows_to_unpaid(service, attendance, payrolls):
    attendance.add(1, date(2026, 2, 2))
    attendance.add(1, date(2026, 2, 3))
    result = service.generate()
    pid = result.payroll_ids[0]

    released = service.delete_payroll(pid)

    assert released == 2
    assert pid not in payrolls.rows
    assert len(attendance.list_unpaid(employee_id=1)) == 2

    again = service.generate()
    assert again.attendance_linked == 2


def test_delete_unknown_payroll(service):
    with pytest.raises(NotFoundError):
        service.delete_payroll(404)


def test_failed_delete_relinks_attendance(service, attendance, payrolls, monkeypatch):
    attendance.add(1, date(2026, 2, 2))
    pid = service.generate().payroll_ids[0]

    def broken_delete(payroll_id):
        raise ExternalServiceError("delete payroll", RuntimeError("lost connection"))

    monkeypatch.setattr(payrolls, "delete", broken_delete)

    with pytest.raises(ExternalServiceError):
        service.delete_payroll(pid)

    assert attendance.list_unpaid() == []
    assert len(attendance.list_for_payroll(pid)) == 1


def test_update_payroll_totals(service, attendance, payrolls):
    attendance.add(1, date(2026, 2, 2))
    pid = service.generate().payroll_ids[0]

    service.update_payroll(pid, {"total_working_days": "3", "total_absent_days": 1, "total_hours": "22.5"})

    p = payrolls.get_by_id(pid)
    assert (p.total_working_days, p.total_absent_days, p.total_hours) == (3, 1, Decimal("22.5"))


@pytest.mark.parametrize(
    "form",
    [
        {"total_working_days": -1, "total_absent_days": 0, "total_hours": 0},
        {"total_working_days": 1, "total_absent_days": "x", "total_hours": 0},
        {"total_working_days": 1, "total_absent_days": 0, "total_hours": "-2"},
        {"total_working_days": 1, "total_absent_days": 0},
    ],
)
def test_update_payroll_rejects_bad_totals(service, form):
    with pytest.raises(ValidationError):
        service.update_payroll(1, form)


def test_payrolls_for_employee_are_newest_first_with_net_pay(payrolls, attendance, employees):
    clock = iter([datetime(2026, 1, 31, 18, 0), datetime(2026, 2, 28, 18, 0)])
    service = PayrollService(payrolls, attendance, employees, clock=lambda: next(clock))

    attendance.add(2, date(2026, 1, 5))
    service.generate()
    attendance.add(2, date(2026, 2, 2))
    attendance.add(2, date(2026, 2, 3))
    service.generate()

    rows = service.payrolls_for(2)

    assert [r.payroll.generated_on.month for r in rows] == [2, 1]
    assert [r.net_pay for r in rows] == [Decimal("1000.00"), Decimal("500.00")]
    assert rows[0].employee_name == "Jose Reyes"


def test_payrolls_for_unknown_employee(service):
    with pytest.raises(NotFoundError):
        service.payrolls_for(999)


def test_employee_summaries(service, attendance):
    attendance.add(1, date(2026, 2, 2), hours="8")
    attendance.add(1, date(2026, 2, 3), hours="8")
    service.generate()

    summaries = {s.employee_id: s for s in service.employee_summaries()}

    maria = summaries[1]
    assert maria.total_payrolls == 1
    assert maria.total_earnings == Decimal("1600.00")
    assert maria.avg_hours == Decimal("16.00")
    assert maria.latest_payroll_hours == Decimal("16")

    jose = summaries[2]
    assert (jose.total_payrolls, jose.total_earnings) == (0, Decimal("0"))
