from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..common.validators import require_date_order, require_id
from ..core.constants import LEAVE_REQUESTS
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.balances import LEAVE_BALANCE, BalanceChange, BalanceWriter
from ..employees.service import EmployeeService
from ..store.repository import RecordStore
from .model import LeaveRequest, LeaveValues
from .reconciliation import reconcile_leave

log = logging.getLogger(__name__)


class LeaveRequestService:
    """Create, edit and delete leave requests while keeping the annual-leave
    balance in step.

    Each operation reads, reconciles (which may refuse), then writes the
    balance before the request itself. Edits and deletes are conditional on
    the request version that was read, so two overlapping edits cannot both
    reverse the same deduction.
    """

    def __init__(self, store: RecordStore, employees: EmployeeService, balances: BalanceWriter):
        self._store = store
        self._employees = employees
        self._balances = balances

    def get(self, request_id: int) -> LeaveRequest:
        r = self._store.find_one(LEAVE_REQUESTS, int(request_id))
        if not r:
            raise NotFoundError(f"Leave request #{request_id} does not exist")
        return LeaveRequest.from_record(r)

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        return [LeaveRequest.from_record(r) for r in self._store.find(LEAVE_REQUESTS, {"employee_id": int(employee_id)})]

    def list_for_tenant(self, tenant_id: int) -> Sequence[LeaveRequest]:
        employee_ids = {e.employee_id for e in self._employees.list_all(tenant_id=tenant_id)}
        rows = self._store.find(LEAVE_REQUESTS)
        return [LeaveRequest.from_record(r) for r in rows if int(r["employee_id"]) in employee_ids]

    @staticmethod
    def _values(values: Mapping[str, Any]) -> LeaveValues:
        try:
            leave_type = LeaveType(values.get("type") or LeaveType.ANNUAL.value)
        except ValueError:
            raise ValidationError(f"Unknown leave type: {values.get('type')!r}")
        try:
            status = LeaveStatus(values.get("status") or LeaveStatus.SUBMITTED.value)
        except ValueError:
            raise ValidationError(f"Unknown leave status: {values.get('status')!r}")
        if not values.get("start_date") or not values.get("end_date"):
            raise ValidationError("Start and end dates are required")

        start = parse_iso_date(values["start_date"])
        end = parse_iso_date(values["end_date"])
        require_date_order(start, end)
        return LeaveValues(
            employee_id=require_id(values.get("employee_id"), "Employee"),
            type=leave_type,
            start_date=start,
            end_date=end,
            status=status,
            reason=(values.get("reason") or "").strip() or None,
            compensation_applied=bool(values.get("compensation_applied")),
        )

    @staticmethod
    def _record(v: LeaveValues, days_deducted: int, version: int) -> dict:
        return {
            "employee_id": v.employee_id,
            "type": v.type.value,
            "start_date": format_iso_date(v.start_date),
            "end_date": format_iso_date(v.end_date),
            "reason": v.reason,
            "status": v.status.value,
            "compensation_applied": v.compensation_applied,
            "days_deducted": days_deducted,
            "version": version,
        }

    def create(self, values: Mapping[str, Any]) -> LeaveRequest:
        v = self._values(values)
        employee = self._employees.get(v.employee_id)
        rec = reconcile_leave(None, v, employee.annual_leave_balance)

        stored = self._balances.apply(
            [BalanceChange(employee, LEAVE_BALANCE, rec.updated_balance)],
            lambda: self._store.insert(LEAVE_REQUESTS, self._record(v, rec.days_for_new_request, 0)),
        )
        request = LeaveRequest.from_record(stored)
        log.info(
            "leave request #%s created for employee #%s (%s %s, delta %+d)",
            request.request_id,
            request.employee_id,
            request.type.value,
            request.status.value,
            rec.balance_delta,
        )
        return request

    def update(self, request_id: int, values: Mapping[str, Any]) -> LeaveRequest:
        prior = self.get(request_id)
        merged = {**prior.to_dict(), **dict(values)}
        v = self._values(merged)

        if v.employee_id == prior.employee_id:
            employee = self._employees.get(v.employee_id)
            rec = reconcile_leave(prior, v, employee.annual_leave_balance)
            changes = [BalanceChange(employee, LEAVE_BALANCE, rec.updated_balance)]
        else:
            # Reassigned: credit the previous employee, charge the new one.
            old_employee = self._employees.get(prior.employee_id)
            new_employee = self._employees.get(v.employee_id)
            released = reconcile_leave(prior, None, old_employee.annual_leave_balance)
            rec = reconcile_leave(None, v, new_employee.annual_leave_balance)
            changes = [
                BalanceChange(old_employee, LEAVE_BALANCE, released.updated_balance),
                BalanceChange(new_employee, LEAVE_BALANCE, rec.updated_balance),
            ]

        stored = self._balances.apply(
            changes,
            lambda: self._store.update(
                LEAVE_REQUESTS,
                prior.request_id,
                self._record(v, rec.days_for_new_request, prior.version + 1),
                expected={"version": prior.version},
            ),
        )
        log.info("leave request #%s updated (delta %+d)", prior.request_id, rec.balance_delta)
        return LeaveRequest.from_record(stored)

    def delete(self, request_id: int) -> None:
        prior = self.get(request_id)
        employee = self._employees.get(prior.employee_id)
        rec = reconcile_leave(prior, None, employee.annual_leave_balance)

        self._balances.apply(
            [BalanceChange(employee, LEAVE_BALANCE, rec.updated_balance)],
            lambda: self._store.delete(LEAVE_REQUESTS, prior.request_id, expected={"version": prior.version}),
        )
        log.info("leave request #%s deleted (delta %+d)", prior.request_id, rec.balance_delta)
