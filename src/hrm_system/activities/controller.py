from __future__ import annotations

from flask import Flask, request

from ..common.http import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/activities", methods=["GET"], endpoint="api_activities")
    def api_activities():
        items = container.activity_service.feed(
            family=request.args.get("type"),
            search=request.args.get("q", ""),
        )
        return ok([a.to_dict() for a in items])
