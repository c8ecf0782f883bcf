from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..common.validators import require_id, require_positive
from ..core.constants import OVERTIME_COMPENSATIONS
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.balances import OVERTIME_BALANCE, BalanceChange, BalanceWriter
from ..employees.service import EmployeeService
from ..store.repository import RecordStore
from .ledger import reconcile_overtime
from .model import OvertimeCompensation

log = logging.getLogger(__name__)


class OvertimeCompensationService:
    def __init__(
        self,
        store: RecordStore,
        employees: EmployeeService,
        balances: BalanceWriter,
        *,
        allow_negative_balance: bool = False,
    ):
        self._store = store
        self._employees = employees
        self._balances = balances
        self._allow_negative = bool(allow_negative_balance)

    def get(self, compensation_id: int) -> OvertimeCompensation:
        r = self._store.find_one(OVERTIME_COMPENSATIONS, int(compensation_id))
        if not r:
            raise NotFoundError(f"Overtime compensation #{compensation_id} does not exist")
        return OvertimeCompensation.from_record(r)

    def list_for_employee(self, employee_id: int) -> Sequence[OvertimeCompensation]:
        rows = self._store.find(OVERTIME_COMPENSATIONS, {"employee_id": int(employee_id)})
        return [OvertimeCompensation.from_record(r) for r in rows]

    @staticmethod
    def _record(values: Mapping[str, Any]) -> dict:
        if not values.get("date"):
            raise ValidationError("Date is required")
        return {
            "employee_id": require_id(values.get("employee_id"), "Employee"),
            "date": format_iso_date(parse_iso_date(values["date"])),
            "compensated_hours": require_positive(values.get("compensated_hours"), "Compensated hours"),
            "reason": (values.get("reason") or "").strip() or None,
        }

    def create(self, values: Mapping[str, Any]) -> OvertimeCompensation:
        record = {**self._record(values), "version": 0}
        employee = self._employees.get(record["employee_id"])
        updated = reconcile_overtime(
            employee.overtime_hours_balance, None, record["compensated_hours"], allow_negative=self._allow_negative
        )

        stored = self._balances.apply(
            [BalanceChange(employee, OVERTIME_BALANCE, updated)],
            lambda: self._store.insert(OVERTIME_COMPENSATIONS, record),
        )
        comp = OvertimeCompensation.from_record(stored)
        log.info("overtime compensation #%s: employee #%s -%.2fh", comp.compensation_id, comp.employee_id, comp.compensated_hours)
        return comp

    def update(self, compensation_id: int, values: Mapping[str, Any]) -> OvertimeCompensation:
        prior = self.get(compensation_id)
        record = self._record({**prior.to_dict(), **dict(values)})

        if record["employee_id"] == prior.employee_id:
            employee = self._employees.get(prior.employee_id)
            updated = reconcile_overtime(
                employee.overtime_hours_balance,
                prior.compensated_hours,
                record["compensated_hours"],
                allow_negative=self._allow_negative,
            )
            changes = [BalanceChange(employee, OVERTIME_BALANCE, updated)]
        else:
            old_employee = self._employees.get(prior.employee_id)
            new_employee = self._employees.get(record["employee_id"])
            changes = [
                BalanceChange(
                    old_employee,
                    OVERTIME_BALANCE,
                    reconcile_overtime(old_employee.overtime_hours_balance, prior.compensated_hours, None),
                ),
                BalanceChange(
                    new_employee,
                    OVERTIME_BALANCE,
                    reconcile_overtime(
                        new_employee.overtime_hours_balance,
                        None,
                        record["compensated_hours"],
                        allow_negative=self._allow_negative,
                    ),
                ),
            ]

        stored = self._balances.apply(
            changes,
            lambda: self._store.update(
                OVERTIME_COMPENSATIONS,
                prior.compensation_id,
                {**record, "version": prior.version + 1},
                expected={"version": prior.version},
            ),
        )
        return OvertimeCompensation.from_record(stored)

    def delete(self, compensation_id: int) -> None:
        prior = self.get(compensation_id)
        employee = self._employees.get(prior.employee_id)
        updated = reconcile_overtime(employee.overtime_hours_balance, prior.compensated_hours, None)

        self._balances.apply(
            [BalanceChange(employee, OVERTIME_BALANCE, updated)],
            lambda: self._store.delete(OVERTIME_COMPENSATIONS, prior.compensation_id, expected={"version": prior.version}),
        )
        log.info("overtime compensation #%s deleted, %.2fh returned to employee #%s", prior.compensation_id, prior.compensated_hours, prior.employee_id)
