from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class PayrollRecord:
    payroll_id: int
    employee_id: int
    month: int
    year: int
    base_salary: float
    overtime_pay: float
    deductions: float
    net_pay: float
    pdf_url: Optional[str] = None

    @classmethod
    def from_record(cls, r: Mapping[str, Any]) -> "PayrollRecord":
        return cls(
            payroll_id=int(r["id"]),
            employee_id=int(r["employee_id"]),
            month=int(r["month"]),
            year=int(r["year"]),
            base_salary=float(r.get("base_salary") or 0),
            overtime_pay=float(r.get("overtime_pay") or 0),
            deductions=float(r.get("deductions") or 0),
            net_pay=float(r.get("net_pay") or 0),
            pdf_url=r.get("pdf_url"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.payroll_id,
            "employee_id": self.employee_id,
            "month": self.month,
            "year": self.year,
            "base_salary": self.base_salary,
            "overtime_pay": self.overtime_pay,
            "deductions": self.deductions,
            "net_pay": self.net_pay,
            "pdf_url": self.pdf_url,
        }
