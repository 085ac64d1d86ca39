from __future__ import annotations

import dataclasses

from flask import Flask, request, send_file

from ..common.http import json_body, mutation_response, ok
from ..common.optimistic import OptimisticCommand
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    tasks = container.task_service

    @app.route("/api/tasks", methods=["GET"], endpoint="api_tasks_list")
    def api_tasks_list():
        return ok(tasks.list_all())

    @app.route("/api/tasks", methods=["POST"], endpoint="api_tasks_create")
    def api_tasks_create():
        task_id = tasks.create(json_body())
        return ok({"task_id": task_id}, status=201, message="Task created")

    @app.route("/api/tasks/<int:task_id>", methods=["PUT"], endpoint="api_tasks_update")
    def api_tasks_update(task_id: int):
        tasks.update(task_id, json_body())
        return ok({"task_id": task_id}, message="Task updated")

    @app.route("/api/tasks/<int:task_id>", methods=["DELETE"], endpoint="api_tasks_delete")
    def api_tasks_delete(task_id: int):
        tasks.delete(task_id)
        return ok({"task_id": task_id}, message="Task deleted")

    @app.route("/api/tasks/<int:task_id>/toggle", methods=["POST"], endpoint="api_tasks_toggle")
    def api_tasks_toggle(task_id: int):
        cmd = OptimisticCommand(
            apply=lambda t: dataclasses.replace(t, is_completed=not t.is_completed),
            commit=lambda: tasks.toggle_completion(task_id),
            refetch=lambda: tasks.get(task_id),
            description=f"toggle task {task_id}",
        )
        result = cmd.run(tasks.get(task_id))
        task = result.value if result.ok else result.state
        return mutation_response(result, "Task completed" if task.is_completed else "Task reopened")

    @app.route("/api/tasks/<int:task_id>/attachment", methods=["POST"], endpoint="api_tasks_attach")
    def api_tasks_attach(task_id: int):
        upload = request.files.get("file")
        if upload is None or not upload.filename:
            raise ValidationError("Please choose a file to upload")
        attachment = tasks.attach(
            task_id,
            data=upload.read(),
            filename=upload.filename,
            content_type=upload.mimetype or "application/octet-stream",
        )
        return ok(attachment, status=201, message="File attached")

    @app.route("/api/employees/<int:employee_id>/tasks", methods=["GET"], endpoint="api_tasks_for_employee")
    def api_tasks_for_employee(employee_id: int):
        hide = request.args.get("hide_completed", "").lower() in ("1", "true", "yes")
        return ok(tasks.list_for_employee(employee_id, hide_completed=hide))

    @app.route("/attachments/<path:stored_name>", methods=["GET"], endpoint="attachment_file")
    def attachment_file(stored_name: str):
        try:
            path = container.attachment_storage.open_path(stored_name)
        except FileNotFoundError:
            raise NotFoundError("Attachment not found")
        return send_file(path)
