from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    projects = container.project_service

    @app.route("/api/projects", methods=["GET"], endpoint="api_projects_list")
    def api_projects_list():
        return ok(projects.overview())

    @app.route("/api/projects", methods=["POST"], endpoint="api_projects_create")
    def api_projects_create():
        project_id = projects.create(json_body())
        return ok({"project_id": project_id}, status=201, message="Project created")

    @app.route("/api/projects/<int:project_id>", methods=["GET"], endpoint="api_projects_get")
    def api_projects_get(project_id: int):
        return ok(
            {
                "project": projects.get(project_id),
                "tasks": container.task_service.list_all(project_id=project_id),
            }
        )

    @app.route("/api/projects/<int:project_id>", methods=["PUT"], endpoint="api_projects_update")
    def api_projects_update(project_id: int):
        projects.update(project_id, json_body())
        return ok({"project_id": project_id}, message="Project updated")

    @app.route("/api/projects/<int:project_id>", methods=["DELETE"], endpoint="api_projects_delete")
    def api_projects_delete(project_id: int):
        projects.delete(project_id)
        return ok({"project_id": project_id}, message="Project and its tasks deleted")
