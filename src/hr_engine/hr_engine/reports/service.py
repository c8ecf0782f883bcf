from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..common.validators import round2
from ..core.constants import ATTENDANCE, EMPLOYEES, HOLIDAYS, LEAVE_REQUESTS
from ..store.repository import Record, RecordStore

UNSPECIFIED = "Unspecified"


@dataclass(frozen=True)
class MonthlyHours:
    month: int
    year: int
    worked_hours: float
    overtime_hours: float

    @property
    def label(self) -> str:
        return f"{self.month:02d}/{self.year}"


@dataclass(frozen=True)
class ReportTotals:
    employees: int
    attendance_records: int
    leave_requests: int
    holidays: int


class ReportService:
    """Read-only aggregates over one tenant's data.

    Attendance and leave rows carry only an employee reference, so they are
    scoped through the tenant's employees.
    """

    def __init__(self, store: RecordStore):
        self._store = store

    def _employees(self, tenant_id: int) -> list[Record]:
        return list(self._store.find(EMPLOYEES, {"tenant_id": int(tenant_id)}))

    def _owned(self, collection: str, tenant_id: int) -> list[Record]:
        employee_ids = {int(e["id"]) for e in self._employees(tenant_id)}
        if not employee_ids:
            return []
        return [r for r in self._store.find(collection) if int(r["employee_id"]) in employee_ids]

    def monthly_hours(self, tenant_id: int, *, employee_id: Optional[int] = None) -> list[MonthlyHours]:
        """Worked and overtime hours per calendar month, oldest first."""
        rows = self._owned(ATTENDANCE, tenant_id)
        if employee_id is not None:
            rows = [r for r in rows if int(r["employee_id"]) == int(employee_id)]

        totals: dict[tuple[int, int], list[float]] = {}
        for r in rows:
            rec = AttendanceRecord.from_record(r)
            key = (rec.work_date.year, rec.work_date.month)
            bucket = totals.setdefault(key, [0.0, 0.0])
            bucket[0] += rec.worked_hours
            bucket[1] += rec.overtime_hours

        return [
            MonthlyHours(month=month, year=year, worked_hours=round2(w), overtime_hours=round2(o))
            for (year, month), (w, o) in sorted(totals.items())
        ]

    def leave_counts_by_type(self, tenant_id: int) -> dict[str, int]:
        counts: dict[str, int] = {}
        for r in self._owned(LEAVE_REQUESTS, tenant_id):
            name = r.get("type") or UNSPECIFIED
            counts[name] = counts.get(name, 0) + 1
        return counts

    def employees_by_department(self, tenant_id: int) -> dict[str, int]:
        counts: dict[str, int] = {}
        for e in self._employees(tenant_id):
            name = e.get("department") or UNSPECIFIED
            counts[name] = counts.get(name, 0) + 1
        return counts

    def totals(self, tenant_id: int) -> ReportTotals:
        return ReportTotals(
            employees=len(self._employees(tenant_id)),
            attendance_records=len(self._owned(ATTENDANCE, tenant_id)),
            leave_requests=len(self._owned(LEAVE_REQUESTS, tenant_id)),
            holidays=len(self._store.find(HOLIDAYS, {"tenant_id": int(tenant_id)})),
        )
