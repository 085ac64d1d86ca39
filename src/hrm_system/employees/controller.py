from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..common.validators import require_enum
from ..core.enums import EmploymentStatus
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees", methods=["GET"], endpoint="api_employees_list")
    def api_employees_list():
        raw_status = request.args.get("status")
        status = require_enum(raw_status, EmploymentStatus, "Status") if raw_status else None
        rows = container.employee_service.search(request.args.get("q", ""), status=status)
        return ok(rows)

    @app.route("/api/employees", methods=["POST"], endpoint="api_employees_create")
    def api_employees_create():
        employee_id = container.employee_service.create(json_body())
        return ok({"employee_id": employee_id}, status=201, message="Employee added")

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="api_employees_get")
    def api_employees_get(employee_id: int):
        return ok(container.employee_service.get(employee_id))

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="api_employees_update")
    def api_employees_update(employee_id: int):
        container.employee_service.update(employee_id, json_body())
        return ok({"employee_id": employee_id}, message="Employee updated")

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="api_employees_delete")
    def api_employees_delete(employee_id: int):
        container.employee_service.delete(employee_id)
        return ok({"employee_id": employee_id}, message="Employee deleted")
