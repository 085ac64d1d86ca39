from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.http import json_body, ok, to_json
from ..common.validators import require_date
from ..core.exceptions import ValidationError
from ..container import Container


def _int_arg(name: str, *, required: bool = True):
    raw = request.args.get(name)
    if raw in (None, ""):
        if required:
            raise ValidationError(f"{name} is required")
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be a whole number")


def register(app: Flask, container: Container) -> None:
    ledger = container.attendance_ledger

    @app.route("/api/attendance", methods=["POST"], endpoint="api_attendance_record")
    def api_attendance_record():
        attendance_id = ledger.record(json_body())
        return ok({"attendance_id": attendance_id}, status=201, message="Attendance recorded")

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="api_attendance_edit")
    def api_attendance_edit(attendance_id: int):
        ledger.edit(attendance_id, json_body())
        return ok({"attendance_id": attendance_id}, message="Attendance updated")

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="api_attendance_delete")
    def api_attendance_delete(attendance_id: int):
        ledger.delete(attendance_id)
        return ok({"attendance_id": attendance_id}, message="Attendance deleted")

    @app.route("/api/attendance/unpaid", methods=["GET"], endpoint="api_attendance_unpaid")
    def api_attendance_unpaid():
        employee_id = _int_arg("employee_id", required=False)
        rows = ledger.unpaid_for(employee_id) if employee_id is not None else ledger.list_unpaid()
        return ok(rows)

    @app.route("/api/attendance/check", methods=["GET"], endpoint="api_attendance_check")
    def api_attendance_check():
        existing = ledger.check_duplicate(
            _int_arg("employee_id"),
            require_date(request.args.get("work_date"), "Date"),
            editing_id=_int_arg("editing_id", required=False),
        )
        return ok({"duplicate": existing is not None, "existing": existing})

    @app.route("/api/attendance/summaries", methods=["GET"], endpoint="api_attendance_summaries")
    def api_attendance_summaries():
        return ok(ledger.employee_summaries())

    @app.route("/api/employees/<int:employee_id>/attendance", methods=["GET"], endpoint="api_attendance_history")
    def api_attendance_history(employee_id: int):
        container.employee_service.get(employee_id)
        return ok([{**to_json(r), "is_paid": r.is_paid} for r in ledger.history_for(employee_id)])

    @app.route(
        "/api/employees/<int:employee_id>/attendance/monthly",
        methods=["GET"],
        endpoint="api_attendance_monthly",
    )
    def api_attendance_monthly(employee_id: int):
        today = date.today()
        year = _int_arg("year", required=False) or today.year
        month = _int_arg("month", required=False) or today.month
        return ok(ledger.monthly_summary(employee_id, year=year, month=month))
