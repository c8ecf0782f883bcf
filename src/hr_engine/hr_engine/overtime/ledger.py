"""Overtime-hours balance arithmetic.

Every stored compensation consumes its hours; there is no status gate.
An edit gives back the previous amount before taking the new one.
"""

from __future__ import annotations

from typing import Optional

from ..common.validators import round2
from ..core.exceptions import InsufficientBalanceError


def _checked(current_balance: float, updated: float, requested: float, allow_negative: bool) -> float:
    updated = round2(updated)
    if updated < 0 and not allow_negative:
        raise InsufficientBalanceError(
            f"Insufficient overtime balance: {current_balance:.2f} hour(s) available, {requested:.2f} requested",
            balance=current_balance,
            requested=requested,
        )
    return updated


def balance_after_create(current_balance: float, hours: float, *, allow_negative: bool = False) -> float:
    return _checked(current_balance, current_balance - hours, hours, allow_negative)


def balance_after_update(
    current_balance: float,
    prior_hours: float,
    new_hours: float,
    *,
    allow_negative: bool = False,
) -> float:
    return _checked(current_balance, current_balance + prior_hours - new_hours, new_hours - prior_hours, allow_negative)


def balance_after_delete(current_balance: float, deleted_hours: float) -> float:
    return round2(current_balance + deleted_hours)


def reconcile_overtime(
    current_balance: float,
    prior_hours: Optional[float],
    new_hours: Optional[float],
    *,
    allow_negative: bool = False,
) -> float:
    """Dispatch on the transition: create (no prior), delete (no new), or update."""
    if prior_hours is None and new_hours is None:
        return round2(current_balance)
    if prior_hours is None:
        return balance_after_create(current_balance, new_hours, allow_negative=allow_negative)
    if new_hours is None:
        return balance_after_delete(current_balance, prior_hours)
    return balance_after_update(current_balance, prior_hours, new_hours, allow_negative=allow_negative)
