from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    def employees_list():
        tenant_id = request.args.get("tenant_id", type=int)
        employees = container.employee_service.list_all(tenant_id=tenant_id)
        return ok([e.to_dict() for e in employees])

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    def employees_create():
        employee = container.employee_service.create(json_body())
        return ok(employee.to_dict(), status=201)

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    def employees_get(employee_id: int):
        return ok(container.employee_service.get(employee_id).to_dict())

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    def employees_update(employee_id: int):
        return ok(container.employee_service.update(employee_id, json_body()).to_dict())

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    def employees_delete(employee_id: int):
        container.employee_service.delete(employee_id)
        return ok(None)
