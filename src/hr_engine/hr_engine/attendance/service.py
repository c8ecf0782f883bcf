from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..authorizations.model import Authorization
from ..common.datetime_utils import format_hhmm, format_iso_date, parse_hhmm, parse_iso_date
from ..common.validators import require_id
from ..core.constants import ATTENDANCE, AUTHORIZATIONS
from ..core.enums import AttendanceStatus, AuthorizationStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.service import EmployeeService
from ..settings.service import SettingsService
from ..store.repository import RecordStore
from .calculator import compute_attendance
from .model import ZERO_METRICS, AttendanceMetrics, AttendanceRecord

log = logging.getLogger(__name__)


class AttendanceService:
    """Manual attendance entry; keeps the derived metrics in sync with their inputs."""

    def __init__(self, store: RecordStore, employees: EmployeeService, settings: SettingsService):
        self._store = store
        self._employees = employees
        self._settings = settings

    def get(self, attendance_id: int) -> AttendanceRecord:
        r = self._store.find_one(ATTENDANCE, int(attendance_id))
        if not r:
            raise NotFoundError(f"Attendance record #{attendance_id} does not exist")
        return AttendanceRecord.from_record(r)

    def list_for_employee(self, employee_id: int) -> Sequence[AttendanceRecord]:
        rows = self._store.find(ATTENDANCE, {"employee_id": int(employee_id)})
        return sorted((AttendanceRecord.from_record(r) for r in rows), key=lambda a: a.work_date)

    def approved_authorizations(self, employee_id: int, work_date: date) -> list[Authorization]:
        rows = self._store.find(
            AUTHORIZATIONS,
            {
                "employee_id": int(employee_id),
                "date": format_iso_date(work_date),
                "status": AuthorizationStatus.APPROVED.value,
            },
        )
        return [Authorization.from_record(r) for r in rows]

    def compute_metrics(
        self,
        employee: Employee,
        *,
        work_date: date,
        status: AttendanceStatus,
        check_in,
        check_out,
    ) -> AttendanceMetrics:
        if status != AttendanceStatus.PRESENT:
            return ZERO_METRICS
        schedule = self._settings.get_schedule(employee.tenant_id)
        return compute_attendance(
            work_date,
            check_in,
            check_out,
            schedule,
            self.approved_authorizations(employee.employee_id, work_date),
        )

    def _inputs(self, values: Mapping[str, Any]):
        employee = self._employees.get(require_id(values.get("employee_id"), "Employee"))
        if not values.get("date"):
            raise ValidationError("Date is required")
        work_date = parse_iso_date(values["date"])
        try:
            status = AttendanceStatus(values.get("status") or AttendanceStatus.PRESENT.value)
        except ValueError:
            raise ValidationError(f"Unknown attendance status: {values.get('status')!r}")
        check_in = parse_hhmm(values.get("check_in_time"))
        check_out = parse_hhmm(values.get("check_out_time"))
        return employee, work_date, status, check_in, check_out

    def preview(self, values: Mapping[str, Any]) -> AttendanceMetrics:
        """Metrics the entry form would store, without saving anything."""
        employee, work_date, status, check_in, check_out = self._inputs(values)
        return self.compute_metrics(
            employee, work_date=work_date, status=status, check_in=check_in, check_out=check_out
        )

    def _build(self, values: Mapping[str, Any]) -> dict:
        employee, work_date, status, check_in, check_out = self._inputs(values)
        metrics = self.compute_metrics(
            employee, work_date=work_date, status=status, check_in=check_in, check_out=check_out
        )
        return {
            "employee_id": employee.employee_id,
            "date": format_iso_date(work_date),
            "check_in_time": format_hhmm(check_in),
            "check_out_time": format_hhmm(check_out),
            "status": status.value,
            "notes": (values.get("notes") or "").strip() or None,
            "worked_hours": metrics.worked_hours,
            "late_minutes": metrics.late_minutes,
            "overtime_hours": metrics.overtime_hours,
        }

    def create(self, values: Mapping[str, Any]) -> AttendanceRecord:
        record = AttendanceRecord.from_record(self._store.insert(ATTENDANCE, self._build(values)))
        log.info(
            "attendance #%s employee #%s %s: worked=%s late=%s overtime=%s",
            record.attendance_id,
            record.employee_id,
            record.work_date,
            record.worked_hours,
            record.late_minutes,
            record.overtime_hours,
        )
        return record

    def update(self, attendance_id: int, values: Mapping[str, Any]) -> AttendanceRecord:
        current = self.get(attendance_id)
        merged = {**current.to_dict(), **dict(values)}
        return AttendanceRecord.from_record(self._store.update(ATTENDANCE, current.attendance_id, self._build(merged)))

    def delete(self, attendance_id: int) -> None:
        current = self.get(attendance_id)
        self._store.delete(ATTENDANCE, current.attendance_id)

    def recompute_day(self, employee_id: int, work_date: date) -> int:
        """Refresh cached metrics for every record of the employee on that day."""
        rows = self._store.find(ATTENDANCE, {"employee_id": int(employee_id), "date": format_iso_date(work_date)})
        if not rows:
            return 0

        employee = self._employees.get(employee_id)
        changed = 0
        for r in rows:
            rec = AttendanceRecord.from_record(r)
            metrics = self.compute_metrics(
                employee,
                work_date=rec.work_date,
                status=rec.status,
                check_in=rec.check_in_time,
                check_out=rec.check_out_time,
            )
            if metrics == rec.metrics:
                continue
            self._store.update(
                ATTENDANCE,
                rec.attendance_id,
                {
                    "worked_hours": metrics.worked_hours,
                    "late_minutes": metrics.late_minutes,
                    "overtime_hours": metrics.overtime_hours,
                },
            )
            changed += 1
        if changed:
            log.info("recomputed %d attendance record(s) for employee #%s on %s", changed, employee_id, work_date)
        return changed

    def find_in_month(self, employee_id: Optional[int], *, month: int, year: int) -> list[AttendanceRecord]:
        filters = {"employee_id": int(employee_id)} if employee_id is not None else None
        out = []
        for r in self._store.find(ATTENDANCE, filters):
            rec = AttendanceRecord.from_record(r)
            if rec.work_date.month == month and rec.work_date.year == year:
                out.append(rec)
        return out
