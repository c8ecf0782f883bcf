from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.http import json_body, ok
from ..common.validators import require_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    def attendance_list():
        employee_id = require_id(request.args.get("employee_id"), "Employee")
        rows = container.attendance_service.list_for_employee(employee_id)
        return ok([r.to_dict() for r in rows])

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_create")
    def attendance_create():
        return ok(container.attendance_service.create(json_body()).to_dict(), status=201)

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_update")
    def attendance_update(attendance_id: int):
        return ok(container.attendance_service.update(attendance_id, json_body()).to_dict())

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    def attendance_delete(attendance_id: int):
        container.attendance_service.delete(attendance_id)
        return ok(None)

    @app.route("/api/attendance/preview", methods=["POST"], endpoint="attendance_preview")
    def attendance_preview():
        return ok(asdict(container.attendance_service.preview(json_body())))
