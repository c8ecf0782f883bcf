from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping

from ..common.datetime_utils import format_iso_date, parse_iso_date


@dataclass(frozen=True)
class Holiday:
    """Public holiday in a tenant's calendar."""

    holiday_id: int
    tenant_id: int
    name: str
    holiday_date: date

    @classmethod
    def from_record(cls, r: Mapping[str, Any]) -> "Holiday":
        return cls(
            holiday_id=int(r["id"]),
            tenant_id=int(r["tenant_id"]),
            name=r["name"],
            holiday_date=parse_iso_date(r["date"]),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.holiday_id,
            "tenant_id": self.tenant_id,
            "name": self.name,
            "date": format_iso_date(self.holiday_date),
        }
