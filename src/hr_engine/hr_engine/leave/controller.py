from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..common.validators import require_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _balance(employee_id: int) -> int:
        return container.employee_service.get(employee_id).annual_leave_balance

    @app.route("/api/leave-requests", methods=["GET"], endpoint="leave_list")
    def leave_list():
        employee_id = request.args.get("employee_id", type=int)
        if employee_id:
            rows = container.leave_service.list_for_employee(employee_id)
        else:
            rows = container.leave_service.list_for_tenant(require_id(request.args.get("tenant_id"), "Tenant"))
        return ok([r.to_dict() for r in rows])

    @app.route("/api/leave-requests", methods=["POST"], endpoint="leave_create")
    def leave_create():
        req = container.leave_service.create(json_body())
        return ok(req.to_dict(), status=201, annual_leave_balance=_balance(req.employee_id))

    @app.route("/api/leave-requests/<int:request_id>", methods=["PUT"], endpoint="leave_update")
    def leave_update(request_id: int):
        req = container.leave_service.update(request_id, json_body())
        return ok(req.to_dict(), annual_leave_balance=_balance(req.employee_id))

    @app.route("/api/leave-requests/<int:request_id>", methods=["DELETE"], endpoint="leave_delete")
    def leave_delete(request_id: int):
        container.leave_service.delete(request_id)
        return ok(None)
