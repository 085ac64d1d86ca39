from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from hrm_system.attendance.service import AttendanceLedger
from hrm_system.core.enums import AttendanceStatus
from hrm_system.core.exceptions import (
    DuplicateRecordError,
    NotFoundError,
    PaidRecordImmutable,
    ValidationError,
)


@pytest.fixture
def ledger(attendance, employees):
    return AttendanceLedger(attendance, employees)


def _form(**overrides):
    form = {"employee_id": 1, "work_date": "2026-02-02", "status": "Present", "hours_worked": "8"}
    form.update(overrides)
    return form


def test_record_present_day(ledger, attendance):
    attendance_id = ledger.record(_form(hours_worked="7.5"))

    rec = attendance.get_by_id(attendance_id)
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.hours_worked == Decimal("7.5")
    assert not rec.is_paid


def test_absent_forces_zero_hours(ledger, attendance):
    attendance_id = ledger.record(_form(status="Absent", hours_worked="8"))
    assert attendance.get_by_id(attendance_id).hours_worked == Decimal("0")


@pytest.mark.parametrize(
    "overrides",
    [
        {"employee_id": None},
        {"employee_id": "abc"},
        {"employee_id": 42},
        {"work_date": ""},
        {"work_date": "02/02/2026"},
        {"status": "Late"},
        {"hours_worked": "25"},
        {"hours_worked": "-1"},
        {"hours_worked": ""},
    ],
)
def test_record_rejects_invalid_input(ledger, attendance, overrides):
    with pytest.raises(ValidationError):
        ledger.record(_form(**overrides))
    assert attendance.rows == {}


def test_hours_bounds_are_inclusive(ledger):
    ledger.record(_form(hours_worked="0"))
    ledger.record(_form(work_date="2026-02-03", hours_worked="24"))


def test_duplicate_employee_date_is_rejected(ledger, attendance):
    ledger.record(_form())
    with pytest.raises(DuplicateRecordError) as exc:
        ledger.record(_form(status="Absent"))
    assert "Present" in str(exc.value)
    assert len(attendance.rows) == 1


def test_same_date_for_another_employee_is_fine(ledger, attendance):
    ledger.record(_form())
    ledger.record(_form(employee_id=2))
    assert len(attendance.rows) == 2


def test_check_duplicate_ignores_row_being_edited(ledger, attendance):
    rec = attendance.add(1, date(2026, 2, 2))

    assert ledger.check_duplicate(1, date(2026, 2, 2)) == rec
    assert ledger.check_duplicate(1, date(2026, 2, 2), editing_id=rec.attendance_id) is None
    assert ledger.check_duplicate(1, date(2026, 2, 3)) is None


def test_edit_unpaid_row(ledger, attendance):
    rec = attendance.add(1, date(2026, 2, 2))

    ledger.edit(rec.attendance_id, _form(hours_worked="6"))

    assert attendance.get_by_id(rec.attendance_id).hours_worked == Decimal("6")


def test_edit_onto_existing_date_is_duplicate(ledger, attendance):
    attendance.add(1, date(2026, 2, 2))
    other = attendance.add(1, date(2026, 2, 3))

    with pytest.raises(DuplicateRecordError):
        ledger.edit(other.attendance_id, _form(work_date="2026-02-02"))


def test_paid_row_cannot_be_edited_or_deleted(ledger, attendance):
    rec = attendance.add(1, date(2026, 2, 2), payroll_id=7)

    with pytest.raises(PaidRecordImmutable):
        ledger.edit(rec.attendance_id, _form(hours_worked="1"))
    with pytest.raises(PaidRecordImmutable):
        ledger.delete(rec.attendance_id)

    assert attendance.get_by_id(rec.attendance_id) == rec


def test_row_paid_between_check_and_write_stays_frozen(ledger, attendance, monkeypatch):
    rec = attendance.add(1, date(2026, 2, 2))
    real_delete = attendance.delete_unpaid

    def pay_then_delete(attendance_id):
        attendance.link_to_payroll([attendance.get_by_id(attendance_id)], 5)
        return real_delete(attendance_id)

    monkeypatch.setattr(attendance, "delete_unpaid", pay_then_delete)

    with pytest.raises(PaidRecordImmutable):
        ledger.delete(rec.attendance_id)
    assert attendance.get_by_id(rec.attendance_id).payroll_id == 5


def test_delete_unpaid_row(ledger, attendance):
    rec = attendance.add(1, date(2026, 2, 2))
    ledger.delete(rec.attendance_id)
    assert attendance.rows == {}


def test_delete_missing_row(ledger):
    with pytest.raises(NotFoundError):
        ledger.delete(123)


def test_unpaid_for_is_date_ascending_and_excludes_paid(ledger, attendance):
    attendance.add(1, date(2026, 2, 5))
    attendance.add(1, date(2026, 2, 1))
    attendance.add(1, date(2026, 1, 20), payroll_id=3)
    attendance.add(2, date(2026, 2, 2))

    rows = ledger.unpaid_for(1)

    assert [r.work_date for r in rows] == [date(2026, 2, 1), date(2026, 2, 5)]


def test_history_marks_paid_rows_newest_first(ledger, attendance):
    attendance.add(1, date(2026, 1, 20), payroll_id=3)
    attendance.add(1, date(2026, 2, 1))

    history = ledger.history_for(1)

    assert [(h.work_date, h.is_paid) for h in history] == [
        (date(2026, 2, 1), False),
        (date(2026, 1, 20), True),
    ]


def test_employee_summaries(ledger, attendance):
    attendance.add(1, date(2026, 2, 1), hours="8")
    attendance.add(1, date(2026, 2, 2), AttendanceStatus.ABSENT, "0")
    attendance.add(1, date(2026, 2, 3), hours="4", payroll_id=1)

    maria = next(s for s in ledger.employee_summaries() if s.employee_id == 1)

    assert (maria.present_count, maria.absent_count, maria.unpaid_count) == (2, 1, 2)
    assert maria.total_hours == Decimal("12")


def test_monthly_summary(ledger, attendance):
    attendance.add(1, date(2026, 1, 31))
    attendance.add(1, date(2026, 2, 1), hours="6")
    attendance.add(1, date(2026, 2, 28), AttendanceStatus.ABSENT, "0")
    attendance.add(1, date(2026, 3, 1))

    summary = ledger.monthly_summary(1, year=2026, month=2)

    assert (summary.present_days, summary.absent_days, summary.total_hours) == (1, 1, Decimal("6"))
    assert [r.work_date.day for r in summary.records] == [1, 28]


def test_monthly_summary_rejects_bad_month(ledger):
    with pytest.raises(ValidationError):
        ledger.monthly_summary(1, year=2026, month=13)
