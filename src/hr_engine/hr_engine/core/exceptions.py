from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class InsufficientBalanceError(DomainError):
    """Raised when an adjustment would drive an employee balance below zero."""

    def __init__(self, message: str, *, balance: float, requested: float):
        super().__init__(message)
        self.balance = balance
        self.requested = requested


class StoreError(DomainError):
    """Raised by the record store (network, constraint violation, ...)."""


class StaleRecordError(StoreError):
    """Raised when a conditional update finds the record changed since it was read."""


class PartialFailureError(DomainError):
    """The balance write succeeded but the record write did not.

    ``balance_restored`` tells the caller whether the compensating balance
    write went through; when it is False the two records disagree and need
    manual reconciliation.
    """

    def __init__(self, message: str, *, employee_id: int, balance_restored: bool, cause: Optional[Exception] = None):
        super().__init__(message)
        self.employee_id = employee_id
        self.balance_restored = balance_restored
        self.cause = cause
