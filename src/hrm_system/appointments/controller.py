from __future__ import annotations

import dataclasses

from flask import Flask, request

from ..common.http import json_body, mutation_response, ok
from ..common.optimistic import OptimisticCommand
from ..common.validators import require_enum
from ..core.enums import AppointmentStatus
from ..container import Container
from .model import AppointmentSaveResult


def _saved(result: AppointmentSaveResult, message: str, *, status: int = 200):
    data = {
        "appointment_id": result.appointment_id,
        "calendar_event_id": result.calendar_event_id,
        "calendar_synced": result.calendar_synced,
    }
    if result.calendar_error is not None:
        data["calendar_error"] = str(result.calendar_error)
        message = f"{message}, but the calendar could not be updated. Please try syncing again."
    return ok(data, status=status, message=message)


def register(app: Flask, container: Container) -> None:
    appointments = container.appointment_service
    actions = {
        AppointmentStatus.COMPLETED: appointments.complete,
        AppointmentStatus.CANCELLED: appointments.cancel,
    }

    def _change_status(appointment_id: int, target: AppointmentStatus, message: str):
        cmd = OptimisticCommand(
            apply=lambda a: dataclasses.replace(a, appointment_status=target),
            commit=lambda: actions[target](appointment_id),
            refetch=lambda: appointments.get(appointment_id),
            description=f"set appointment {appointment_id} to {target.value}",
        )
        return mutation_response(cmd.run(appointments.get(appointment_id)), message)

    @app.route("/api/appointments", methods=["GET"], endpoint="api_appointments_list")
    def api_appointments_list():
        raw_status = request.args.get("status")
        raw_employee = request.args.get("employee_id")
        rows = appointments.list_all(
            employee_id=int(raw_employee) if raw_employee and raw_employee.isdigit() else None,
            status=require_enum(raw_status, AppointmentStatus, "Status") if raw_status else None,
        )
        return ok(rows)

    @app.route("/api/appointments", methods=["POST"], endpoint="api_appointments_create")
    def api_appointments_create():
        body = json_body()
        result = appointments.create(body, sync_to_calendar=bool(body.get("sync_to_calendar")))
        return _saved(result, "Appointment created", status=201)

    @app.route("/api/appointments/<int:appointment_id>", methods=["GET"], endpoint="api_appointments_get")
    def api_appointments_get(appointment_id: int):
        return ok(appointments.get(appointment_id))

    @app.route("/api/appointments/<int:appointment_id>", methods=["PUT"], endpoint="api_appointments_update")
    def api_appointments_update(appointment_id: int):
        return _saved(appointments.update(appointment_id, json_body()), "Appointment updated")

    @app.route("/api/appointments/<int:appointment_id>", methods=["DELETE"], endpoint="api_appointments_delete")
    def api_appointments_delete(appointment_id: int):
        return _saved(appointments.delete(appointment_id), "Appointment deleted")

    @app.route(
        "/api/appointments/<int:appointment_id>/complete",
        methods=["POST"],
        endpoint="api_appointments_complete",
    )
    def api_appointments_complete(appointment_id: int):
        return _change_status(appointment_id, AppointmentStatus.COMPLETED, "Appointment completed")

    @app.route(
        "/api/appointments/<int:appointment_id>/cancel",
        methods=["POST"],
        endpoint="api_appointments_cancel",
    )
    def api_appointments_cancel(appointment_id: int):
        return _change_status(appointment_id, AppointmentStatus.CANCELLED, "Appointment cancelled")

    @app.route(
        "/api/appointments/<int:appointment_id>/sync",
        methods=["POST"],
        endpoint="api_appointments_sync",
    )
    def api_appointments_sync(appointment_id: int):
        event_id = appointments.sync_to_calendar(appointment_id)
        return ok({"appointment_id": appointment_id, "calendar_event_id": event_id}, message="Added to calendar")
