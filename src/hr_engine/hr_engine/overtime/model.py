from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import format_iso_date, parse_iso_date


@dataclass(frozen=True)
class OvertimeCompensation:
    """Hours taken back from an employee's overtime balance (time off in lieu)."""

    compensation_id: int
    employee_id: int
    work_date: date
    compensated_hours: float
    reason: Optional[str] = None
    version: int = 0

    @classmethod
    def from_record(cls, r: Mapping[str, Any]) -> "OvertimeCompensation":
        return cls(
            compensation_id=int(r["id"]),
            employee_id=int(r["employee_id"]),
            work_date=parse_iso_date(r["date"]),
            compensated_hours=float(r["compensated_hours"]),
            reason=r.get("reason"),
            version=int(r.get("version") or 0),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.compensation_id,
            "employee_id": self.employee_id,
            "date": format_iso_date(self.work_date),
            "compensated_hours": self.compensated_hours,
            "reason": self.reason,
            "version": self.version,
        }
