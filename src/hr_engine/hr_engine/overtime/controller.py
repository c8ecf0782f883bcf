from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..common.validators import require_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _balance(employee_id: int) -> float:
        return container.employee_service.get(employee_id).overtime_hours_balance

    @app.route("/api/overtime-compensations", methods=["GET"], endpoint="overtime_list")
    def overtime_list():
        employee_id = require_id(request.args.get("employee_id"), "Employee")
        return ok([c.to_dict() for c in container.overtime_service.list_for_employee(employee_id)])

    @app.route("/api/overtime-compensations", methods=["POST"], endpoint="overtime_create")
    def overtime_create():
        comp = container.overtime_service.create(json_body())
        return ok(comp.to_dict(), status=201, overtime_hours_balance=_balance(comp.employee_id))

    @app.route("/api/overtime-compensations/<int:compensation_id>", methods=["PUT"], endpoint="overtime_update")
    def overtime_update(compensation_id: int):
        comp = container.overtime_service.update(compensation_id, json_body())
        return ok(comp.to_dict(), overtime_hours_balance=_balance(comp.employee_id))

    @app.route("/api/overtime-compensations/<int:compensation_id>", methods=["DELETE"], endpoint="overtime_delete")
    def overtime_delete(compensation_id: int):
        container.overtime_service.delete(compensation_id)
        return ok(None)
