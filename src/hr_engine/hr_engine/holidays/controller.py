from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..common.validators import require_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/holidays", methods=["GET"], endpoint="holidays_list")
    def holidays_list():
        tenant_id = require_id(request.args.get("tenant_id"), "Tenant")
        return ok([h.to_dict() for h in container.holiday_service.list_for_tenant(tenant_id)])

    @app.route("/api/holidays", methods=["POST"], endpoint="holidays_create")
    def holidays_create():
        return ok(container.holiday_service.create(json_body()).to_dict(), status=201)

    @app.route("/api/holidays/<int:holiday_id>", methods=["PUT"], endpoint="holidays_update")
    def holidays_update(holiday_id: int):
        return ok(container.holiday_service.update(holiday_id, json_body()).to_dict())

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="holidays_delete")
    def holidays_delete(holiday_id: int):
        container.holiday_service.delete(holiday_id)
        return ok(None)
