from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok
from ..common.validators import require_id, require_non_negative
from ..container import Container
from .calculator.standard_calculator import compute_net_pay


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/overtime-pay", methods=["GET"], endpoint="payroll_overtime_pay")
    def payroll_overtime_pay():
        employee_id = request.args.get("employee_id", type=int)
        total = container.payroll_service.automated_overtime_pay(
            employee_id, request.args.get("month"), request.args.get("year")
        )
        return ok({"overtime_pay": total})

    @app.route("/api/payroll/net-pay", methods=["POST"], endpoint="payroll_net_pay")
    def payroll_net_pay():
        body = json_body()
        net = compute_net_pay(
            require_non_negative(body.get("base_salary") or 0, "Base salary"),
            require_non_negative(body.get("overtime_pay") or 0, "Overtime pay"),
            require_non_negative(body.get("deductions") or 0, "Deductions"),
        )
        return ok({"net_pay": net})

    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_list")
    def payroll_list():
        employee_id = require_id(request.args.get("employee_id"), "Employee")
        return ok([p.to_dict() for p in container.payroll_service.list_for_employee(employee_id)])

    @app.route("/api/payroll", methods=["POST"], endpoint="payroll_create")
    def payroll_create():
        return ok(container.payroll_service.create(json_body()).to_dict(), status=201)

    @app.route("/api/payroll/<int:payroll_id>", methods=["PUT"], endpoint="payroll_update")
    def payroll_update(payroll_id: int):
        return ok(container.payroll_service.update(payroll_id, json_body()).to_dict())

    @app.route("/api/payroll/<int:payroll_id>", methods=["DELETE"], endpoint="payroll_delete")
    def payroll_delete(payroll_id: int):
        container.payroll_service.delete(payroll_id)
        return ok(None)
