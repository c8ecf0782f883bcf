from datetime import date

import pytest

from src.hr_engine.hr_engine.core.enums import LeaveStatus, LeaveType
from src.hr_engine.hr_engine.core.exceptions import InsufficientBalanceError, ValidationError
from src.hr_engine.hr_engine.leave.model import LeaveRequest, LeaveValues
from src.hr_engine.hr_engine.leave.reconciliation import (
    NOT_EFFECTIVE,
    EffectiveAnnual,
    balance_delta,
    leave_days,
    reconcile_leave,
)


def _values(type=LeaveType.ANNUAL, status=LeaveStatus.APPROVED, start=date(2024, 3, 4), end=date(2024, 3, 8)):
    return LeaveValues(employee_id=1, type=type, start_date=start, end_date=end, status=status)


def _prior(type=LeaveType.ANNUAL, status=LeaveStatus.APPROVED, days_deducted=5, start=date(2024, 3, 4), end=date(2024, 3, 8)):
    return LeaveRequest(
        request_id=7,
        employee_id=1,
        type=type,
        start_date=start,
        end_date=end,
        status=status,
        days_deducted=days_deducted,
    )


def test_leave_days_is_inclusive():
    assert leave_days(date(2024, 3, 4), date(2024, 3, 4)) == 1
    assert leave_days(date(2024, 2, 27), date(2024, 3, 1)) == 4  # leap year


def test_leave_days_rejects_inverted_range():
    with pytest.raises(ValidationError):
        leave_days(date(2024, 3, 5), date(2024, 3, 4))


def test_delta_is_credit_minus_charge():
    assert balance_delta(NOT_EFFECTIVE, NOT_EFFECTIVE) == 0
    assert balance_delta(NOT_EFFECTIVE, EffectiveAnnual(3)) == -3
    assert balance_delta(EffectiveAnnual(3), NOT_EFFECTIVE) == 3
    assert balance_delta(EffectiveAnnual(3), EffectiveAnnual(3)) == 0
    assert balance_delta(EffectiveAnnual(3), EffectiveAnnual(5)) == -2


def test_create_approved_annual_charges_days():
    rec = reconcile_leave(None, _values(), 20)

    assert (rec.days_for_new_request, rec.balance_delta, rec.updated_balance) == (5, -5, 15)


@pytest.mark.parametrize(
    "values",
    [
        _values(status=LeaveStatus.SUBMITTED),
        _values(status=LeaveStatus.REJECTED),
        _values(status=LeaveStatus.CANCELLED),
        _values(type=LeaveType.SICK),
        _values(type=LeaveType.UNPAID),
    ],
)
def test_create_without_annual_approval_is_neutral(values):
    rec = reconcile_leave(None, values, 20)

    assert (rec.days_for_new_request, rec.balance_delta, rec.updated_balance) == (0, 0, 20)


def test_unchanged_update_is_idempotent():
    rec = reconcile_leave(_prior(), _values(), 15)

    assert rec.balance_delta == 0
    assert rec.updated_balance == 15
    assert rec.days_for_new_request == 5


def test_revoking_approval_credits_memoised_days():
    # Memo wins over the current date span.
    rec = reconcile_leave(_prior(days_deducted=4), _values(status=LeaveStatus.REJECTED), 15)

    assert (rec.days_for_new_request, rec.balance_delta, rec.updated_balance) == (0, 4, 19)


def test_changing_dates_of_approved_annual_charges_the_difference():
    rec = reconcile_leave(_prior(), _values(end=date(2024, 3, 11)), 15)

    assert (rec.days_for_new_request, rec.balance_delta, rec.updated_balance) == (8, -3, 12)


def test_switching_type_away_from_annual_credits_back():
    rec = reconcile_leave(_prior(), _values(type=LeaveType.SICK), 15)

    assert rec.balance_delta == 5


def test_prior_not_effective_then_approved_charges():
    rec = reconcile_leave(_prior(status=LeaveStatus.SUBMITTED, days_deducted=0), _values(), 10)

    assert rec.balance_delta == -5
    assert rec.updated_balance == 5


def test_delete_of_approved_annual_credits_back():
    rec = reconcile_leave(_prior(), None, 15)

    assert (rec.days_for_new_request, rec.balance_delta, rec.updated_balance) == (0, 5, 20)


def test_delete_of_other_request_is_neutral():
    rec = reconcile_leave(_prior(type=LeaveType.MATERNITY, days_deducted=0), None, 15)

    assert rec.balance_delta == 0


def test_insufficient_balance_is_refused():
    with pytest.raises(InsufficientBalanceError) as exc:
        reconcile_leave(None, _values(end=date(2024, 3, 6)), 2)

    assert exc.value.balance == 2
    assert exc.value.requested == 3


def test_extension_beyond_balance_is_refused():
    with pytest.raises(InsufficientBalanceError):
        reconcile_leave(_prior(), _values(end=date(2024, 3, 15)), 2)
