from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings/<int:tenant_id>/schedule", methods=["GET"], endpoint="settings_schedule_get")
    def settings_schedule_get(tenant_id: int):
        stored = container.settings_service.get_schedule(tenant_id)
        schedule = stored or container.settings_service.get_schedule_or_default(tenant_id)
        return ok(schedule.to_list(), configured=stored is not None)

    @app.route("/api/settings/<int:tenant_id>/schedule", methods=["PUT"], endpoint="settings_schedule_put")
    def settings_schedule_put(tenant_id: int):
        body = json_body()
        schedule = container.settings_service.save_schedule(tenant_id, body.get("daily_settings") or [])
        return ok(schedule.to_list())
