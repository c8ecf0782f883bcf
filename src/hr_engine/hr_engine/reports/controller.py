from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.http import ok
from ..common.validators import require_id
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _tenant_id() -> int:
        return require_id(request.args.get("tenant_id"), "Tenant")

    @app.route("/api/reports/monthly-hours", methods=["GET"], endpoint="reports_monthly_hours")
    def reports_monthly_hours():
        employee_id = request.args.get("employee_id", type=int)
        rows = container.report_service.monthly_hours(_tenant_id(), employee_id=employee_id)
        return ok(
            [
                {"month_year": r.label, "worked_hours": r.worked_hours, "overtime_hours": r.overtime_hours}
                for r in rows
            ]
        )

    @app.route("/api/reports/leave-types", methods=["GET"], endpoint="reports_leave_types")
    def reports_leave_types():
        counts = container.report_service.leave_counts_by_type(_tenant_id())
        return ok([{"name": k, "value": v} for k, v in counts.items()])

    @app.route("/api/reports/departments", methods=["GET"], endpoint="reports_departments")
    def reports_departments():
        counts = container.report_service.employees_by_department(_tenant_id())
        return ok([{"department": k, "count": v} for k, v in counts.items()])

    @app.route("/api/reports/totals", methods=["GET"], endpoint="reports_totals")
    def reports_totals():
        return ok(asdict(container.report_service.totals(_tenant_id())))
