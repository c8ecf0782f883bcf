from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ..attendance.service import AttendanceService
from ..common.datetime_utils import format_hhmm, format_iso_date, parse_hhmm, parse_iso_date
from ..common.validators import require_id
from ..core.constants import AUTHORIZATIONS
from ..core.enums import AuthorizationStatus, AuthorizationType
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.service import EmployeeService
from ..store.repository import RecordStore
from .model import Authorization

log = logging.getLogger(__name__)


class AuthorizationService:
    """Authorizations change how lateness is scored, so every write refreshes
    the attendance metrics of the affected day(s)."""

    def __init__(self, store: RecordStore, employees: EmployeeService, attendance: AttendanceService):
        self._store = store
        self._employees = employees
        self._attendance = attendance

    def get(self, authorization_id: int) -> Authorization:
        r = self._store.find_one(AUTHORIZATIONS, int(authorization_id))
        if not r:
            raise NotFoundError(f"Authorization #{authorization_id} does not exist")
        return Authorization.from_record(r)

    def list_for_employee(self, employee_id: int) -> Sequence[Authorization]:
        return [Authorization.from_record(r) for r in self._store.find(AUTHORIZATIONS, {"employee_id": int(employee_id)})]

    def _build(self, values: Mapping[str, Any]) -> dict:
        employee = self._employees.get(require_id(values.get("employee_id"), "Employee"))
        if not values.get("date"):
            raise ValidationError("Date is required")
        try:
            auth_type = AuthorizationType(values.get("type"))
        except ValueError:
            raise ValidationError(f"Unknown authorization type: {values.get('type')!r}")
        try:
            status = AuthorizationStatus(values.get("status") or AuthorizationStatus.SUBMITTED.value)
        except ValueError:
            raise ValidationError(f"Unknown authorization status: {values.get('status')!r}")

        return {
            "employee_id": employee.employee_id,
            "type": auth_type.value,
            "date": format_iso_date(parse_iso_date(values["date"])),
            "requested_time": format_hhmm(parse_hhmm(values.get("requested_time"))),
            "reason": (values.get("reason") or "").strip() or None,
            "status": status.value,
        }

    def create(self, values: Mapping[str, Any]) -> Authorization:
        auth = Authorization.from_record(self._store.insert(AUTHORIZATIONS, self._build(values)))
        self._attendance.recompute_day(auth.employee_id, auth.work_date)
        return auth

    def update(self, authorization_id: int, values: Mapping[str, Any]) -> Authorization:
        prior = self.get(authorization_id)
        merged = {**prior.to_dict(), **dict(values)}
        auth = Authorization.from_record(self._store.update(AUTHORIZATIONS, prior.authorization_id, self._build(merged)))

        self._attendance.recompute_day(auth.employee_id, auth.work_date)
        if (prior.employee_id, prior.work_date) != (auth.employee_id, auth.work_date):
            self._attendance.recompute_day(prior.employee_id, prior.work_date)
        return auth

    def delete(self, authorization_id: int) -> None:
        prior = self.get(authorization_id)
        self._store.delete(AUTHORIZATIONS, prior.authorization_id)
        self._attendance.recompute_day(prior.employee_id, prior.work_date)
        log.info("deleted authorization #%s", prior.authorization_id)
