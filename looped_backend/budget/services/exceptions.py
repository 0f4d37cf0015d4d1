# budget/services/exceptions.py

"""
BUDGET LEDGER ERRORS

Centralized domain errors for the ledger engine and every service that
moves money through it.

Every error carries a stable `code` so API layers and the operation facade
can branch on it without parsing messages. Business-rule outcomes
(insufficient funds, invalid amount, bad transition, not found) are
expected results; InternalConsistencyError marks a structural failure.
"""

from __future__ import annotations

from decimal import Decimal


class LedgerError(Exception):
    """Base exception for all budget ledger failures."""

    code = "LEDGER_ERROR"

    def details(self) -> dict:
        return {}


class InsufficientFundsError(LedgerError):
    """Raised when a deduction would drive the balance below zero."""

    code = "INSUFFICIENT_FUNDS"

    def __init__(self, *, current: Decimal, required: Decimal, message: str | None = None):
        self.current = current
        self.required = required
        super().__init__(
            message
            or f"Insufficient budget. Current: {current}, Required: {required}"
        )

    def details(self) -> dict:
        return {"current": str(self.current), "required": str(self.required)}


class InsufficientFundsForReversalError(InsufficientFundsError):
    """Raised when undoing a sale would remove money that is already spent."""

    code = "INSUFFICIENT_FUNDS_FOR_REVERSAL"

    def __init__(self, *, current: Decimal, required: Decimal):
        super().__init__(
            current=current,
            required=required,
            message=(
                "Insufficient budget to reverse sale. "
                f"Current budget: {current}, Required: {required}"
            ),
        )


class InvalidAmountError(LedgerError):
    """Raised for non-positive top-ups and costs."""

    code = "INVALID_AMOUNT"


class InvalidInputError(LedgerError):
    """Raised when an operation payload is malformed (missing name, bad kind...)."""

    code = "INVALID_INPUT"


class NotFoundOrUnauthorizedError(LedgerError):
    """Raised when an entity is missing, deleted, or owned by another user."""

    code = "NOT_FOUND"


class InternalConsistencyError(LedgerError):
    """
    Raised when a composite operation failed partway.

    The surrounding atomic unit has already been rolled back when this is
    reported; `retryable` is True for lock timeouts / transient DB errors.
    """

    code = "INTERNAL_CONSISTENCY"

    def __init__(self, *, operation: str, retryable: bool = False, message: str | None = None):
        self.operation = operation
        self.retryable = retryable
        super().__init__(message or f"Operation '{operation}' failed and was rolled back")

    def details(self) -> dict:
        return {"operation": self.operation, "retryable": self.retryable}
