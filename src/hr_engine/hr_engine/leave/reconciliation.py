"""Annual-leave balance reconciliation.

A leave request affects the balance only while it is an approved annual
leave. Each state is classified as ``NotEffective`` or
``EffectiveAnnual(days)`` and the balance delta is the credit of the prior
effect minus the charge of the new one, so the balance always reflects
exactly one deduction per currently approved annual request.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from ..common.datetime_utils import inclusive_days
from ..common.validators import require_date_order
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import InsufficientBalanceError
from .model import LeaveRequest, LeaveValues


@dataclass(frozen=True)
class NotEffective:
    days: int = 0


@dataclass(frozen=True)
class EffectiveAnnual:
    days: int


LeaveEffect = Union[NotEffective, EffectiveAnnual]

NOT_EFFECTIVE = NotEffective()


@dataclass(frozen=True)
class LeaveReconciliation:
    days_for_new_request: int
    balance_delta: int
    updated_balance: int


def leave_days(start: date, end: date) -> int:
    """Calendar days covered by the request, both ends included."""
    require_date_order(start, end)
    return inclusive_days(start, end)


def _is_approved_annual(leave_type: LeaveType, status: LeaveStatus) -> bool:
    return leave_type == LeaveType.ANNUAL and status == LeaveStatus.APPROVED


def prior_effect(prior: Optional[LeaveRequest]) -> LeaveEffect:
    """Effect of the stored request, as memoised in ``days_deducted``."""
    if prior is None or not _is_approved_annual(prior.type, prior.status):
        return NOT_EFFECTIVE
    return EffectiveAnnual(prior.days_deducted)


def new_effect(values: Optional[LeaveValues]) -> LeaveEffect:
    """Effect of the submitted state; ``None`` means the request is being deleted."""
    if values is None:
        return NOT_EFFECTIVE
    days = leave_days(values.start_date, values.end_date)
    if not _is_approved_annual(values.type, values.status):
        return NOT_EFFECTIVE
    return EffectiveAnnual(days)


def balance_delta(old: LeaveEffect, new: LeaveEffect) -> int:
    """Positive credits the balance back, negative deducts."""
    credit = old.days if isinstance(old, EffectiveAnnual) else 0
    charge = new.days if isinstance(new, EffectiveAnnual) else 0
    return credit - charge


def reconcile_leave(
    prior: Optional[LeaveRequest],
    values: Optional[LeaveValues],
    current_balance: int,
) -> LeaveReconciliation:
    """Delta and resulting balance for a create (no prior), edit, or delete (no values).

    Raises ``InsufficientBalanceError`` when the balance would go negative;
    nothing must be written in that case.
    """

    old = prior_effect(prior)
    new = new_effect(values)
    delta = balance_delta(old, new)
    updated = int(current_balance) + delta
    if updated < 0:
        raise InsufficientBalanceError(
            f"Insufficient annual leave balance: {current_balance} day(s) available, {new.days - old.days} requested",
            balance=current_balance,
            requested=new.days - old.days,
        )
    return LeaveReconciliation(days_for_new_request=new.days, balance_delta=delta, updated_balance=updated)
