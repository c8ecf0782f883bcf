from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Any, Mapping, Optional

from ..common.datetime_utils import format_hhmm, format_iso_date, parse_hhmm, parse_iso_date
from ..core.enums import AuthorizationStatus, AuthorizationType


@dataclass(frozen=True)
class Authorization:
    """Pre-approved exception to the schedule (late arrival, early departure, ...)."""

    authorization_id: int
    employee_id: int
    type: AuthorizationType
    work_date: date
    status: AuthorizationStatus
    requested_time: Optional[time] = None
    reason: Optional[str] = None

    @property
    def is_approved_late_arrival(self) -> bool:
        return self.type == AuthorizationType.LATE_ARRIVAL and self.status == AuthorizationStatus.APPROVED

    @classmethod
    def from_record(cls, r: Mapping[str, Any]) -> "Authorization":
        return cls(
            authorization_id=int(r["id"]),
            employee_id=int(r["employee_id"]),
            type=AuthorizationType(r["type"]),
            work_date=parse_iso_date(r["date"]),
            status=AuthorizationStatus(r["status"]),
            requested_time=parse_hhmm(r.get("requested_time")),
            reason=r.get("reason"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.authorization_id,
            "employee_id": self.employee_id,
            "type": self.type.value,
            "date": format_iso_date(self.work_date),
            "requested_time": format_hhmm(self.requested_time),
            "reason": self.reason,
            "status": self.status.value,
        }
