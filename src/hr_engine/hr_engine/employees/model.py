from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee with the two mutable balances the engine owns."""

    employee_id: int
    tenant_id: int
    first_name: str
    last_name: str
    annual_leave_balance: int = 0
    overtime_hours_balance: float = 0.0
    base_salary: float = 0.0
    cin: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    hire_date: Optional[str] = None
    version: int = 0

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_record(cls, r: Mapping[str, Any]) -> "Employee":
        return cls(
            employee_id=int(r["id"]),
            tenant_id=int(r["tenant_id"]),
            first_name=r["first_name"],
            last_name=r["last_name"],
            annual_leave_balance=int(r.get("annual_leave_balance") or 0),
            overtime_hours_balance=float(r.get("overtime_hours_balance") or 0),
            base_salary=float(r.get("base_salary") or 0),
            cin=r.get("cin"),
            contact_number=r.get("contact_number"),
            email=r.get("email"),
            position=r.get("position"),
            department=r.get("department"),
            hire_date=r.get("hire_date"),
            version=int(r.get("version") or 0),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "tenant_id": self.tenant_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "cin": self.cin,
            "contact_number": self.contact_number,
            "email": self.email,
            "position": self.position,
            "department": self.department,
            "hire_date": self.hire_date,
            "base_salary": self.base_salary,
            "annual_leave_balance": self.annual_leave_balance,
            "overtime_hours_balance": self.overtime_hours_balance,
            "version": self.version,
        }
