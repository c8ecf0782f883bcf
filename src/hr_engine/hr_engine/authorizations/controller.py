from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..common.validators import require_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/authorizations", methods=["GET"], endpoint="authorizations_list")
    def authorizations_list():
        employee_id = require_id(request.args.get("employee_id"), "Employee")
        return ok([a.to_dict() for a in container.authorization_service.list_for_employee(employee_id)])

    @app.route("/api/authorizations", methods=["POST"], endpoint="authorizations_create")
    def authorizations_create():
        return ok(container.authorization_service.create(json_body()).to_dict(), status=201)

    @app.route("/api/authorizations/<int:authorization_id>", methods=["PUT"], endpoint="authorizations_update")
    def authorizations_update(authorization_id: int):
        return ok(container.authorization_service.update(authorization_id, json_body()).to_dict())

    @app.route("/api/authorizations/<int:authorization_id>", methods=["DELETE"], endpoint="authorizations_delete")
    def authorizations_delete(authorization_id: int):
        container.authorization_service.delete(authorization_id)
        return ok(None)
