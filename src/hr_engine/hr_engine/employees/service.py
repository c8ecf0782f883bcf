from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..common.validators import require_id, require_non_empty, require_non_negative
from ..core.constants import (
    ATTENDANCE,
    AUTHORIZATIONS,
    DEFAULT_ANNUAL_LEAVE_BALANCE,
    EMPLOYEES,
    LEAVE_REQUESTS,
    OVERTIME_COMPENSATIONS,
    PAYROLL,
)
from ..core.exceptions import NotFoundError, ValidationError
from ..store.repository import RecordStore
from .model import Employee

log = logging.getLogger(__name__)

# Records owned by an employee; removed with it (ON DELETE CASCADE in MySQL).
DEPENDENT_COLLECTIONS = (ATTENDANCE, AUTHORIZATIONS, LEAVE_REQUESTS, OVERTIME_COMPENSATIONS, PAYROLL)


def _optional_text(value: Any) -> Optional[str]:
    return (value or "").strip() or None


class EmployeeService:
    def __init__(self, store: RecordStore):
        self._store = store

    def get(self, employee_id: int) -> Employee:
        r = self._store.find_one(EMPLOYEES, int(employee_id))
        if not r:
            raise NotFoundError(f"Employee #{employee_id} does not exist")
        return Employee.from_record(r)

    def list_all(self, *, tenant_id: Optional[int] = None) -> Sequence[Employee]:
        filters = {"tenant_id": int(tenant_id)} if tenant_id is not None else None
        return [Employee.from_record(r) for r in self._store.find(EMPLOYEES, filters)]

    @staticmethod
    def _fields(values: Mapping[str, Any]) -> dict:
        leave_balance = require_non_negative(
            values.get("annual_leave_balance", DEFAULT_ANNUAL_LEAVE_BALANCE), "Annual leave balance"
        )
        if leave_balance != int(leave_balance):
            raise ValidationError("Annual leave balance must be a whole number of days")

        hire_date = values.get("hire_date")
        return {
            "tenant_id": require_id(values.get("tenant_id"), "Tenant"),
            "first_name": require_non_empty(values.get("first_name"), "First name"),
            "last_name": require_non_empty(values.get("last_name"), "Last name"),
            "cin": _optional_text(values.get("cin")),
            "contact_number": _optional_text(values.get("contact_number")),
            "email": _optional_text(values.get("email")),
            "position": _optional_text(values.get("position")),
            "department": _optional_text(values.get("department")),
            "hire_date": format_iso_date(parse_iso_date(hire_date)) if hire_date else None,
            "base_salary": require_non_negative(values.get("base_salary", 0), "Base salary"),
            "annual_leave_balance": int(leave_balance),
            "overtime_hours_balance": require_non_negative(values.get("overtime_hours_balance", 0), "Overtime hours balance"),
        }

    def create(self, values: Mapping[str, Any]) -> Employee:
        record = {**self._fields(values), "version": 0}
        employee = Employee.from_record(self._store.insert(EMPLOYEES, record))
        log.info("created employee #%s (%s)", employee.employee_id, employee.full_name)
        return employee

    def update(self, employee_id: int, values: Mapping[str, Any]) -> Employee:
        """Edit the profile; balances may be corrected by hand too.

        The write is conditional on the employee ``version`` (the one the
        client sent, else the one just read), so a manual correction never
        silently overwrites a balance moved by a leave or overtime operation.
        """

        current = self.get(employee_id)
        version = current.version if values.get("version") is None else int(values["version"])
        merged = {**current.to_dict(), **dict(values)}
        changes = {**self._fields(merged), "version": version + 1}

        stored = self._store.update(EMPLOYEES, current.employee_id, changes, expected={"version": version})
        employee = Employee.from_record(stored)
        log.info("updated employee #%s", employee.employee_id)
        return employee

    def delete(self, employee_id: int) -> None:
        current = self.get(employee_id)
        self._store.delete(EMPLOYEES, current.employee_id)
        removed = 0
        for collection in DEPENDENT_COLLECTIONS:
            for r in self._store.find(collection, {"employee_id": current.employee_id}):
                self._store.delete(collection, r["id"])
                removed += 1
        log.info("deleted employee #%s and %d dependent record(s)", current.employee_id, removed)
