# budget/services/ledger_service.py

"""
======================================================
PATH: budget/services/ledger_service.py
======================================================
LEDGER ENGINE

This module is the ONLY place allowed to:
- Create BudgetTransaction rows
- Write Budget.current_amount
- Enforce the non-negative balance rule for new deductions
- Void transactions (correction mechanism)

Everything else (batch purchase, item sale, cost add/refund) must pass
through here.

CONCURRENCY:
- The per-user Budget row is the serialization point. Every read-then-write
  on it happens under select_for_update() inside transaction.atomic, so the
  balance check and both writes are one unit per user.
- Lock order for composite operations: Budget -> Batch -> Item/Cost.
  Callers that need more rows than the budget call lock_budget() first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from budget.models import Budget, BudgetTransaction
from budget.services.exceptions import (
    InsufficientFundsError,
    InvalidAmountError,
    InvalidInputError,
    NotFoundOrUnauthorizedError,
)
from budget.services.money import ZERO, to_money

logger = logging.getLogger(__name__)

DEFAULT_TOP_UP_DESCRIPTION = "Budget top-up"


@dataclass(frozen=True)
class LedgerPosting:
    transaction: BudgetTransaction
    previous_balance: Decimal
    updated_balance: Decimal


@dataclass(frozen=True)
class ReconciliationResult:
    user_id: object
    cached_balance: Decimal
    ledger_balance: Decimal
    fixed: bool = False

    @property
    def drift(self) -> Decimal:
        return self.cached_balance - self.ledger_balance

    @property
    def is_consistent(self) -> bool:
        return self.drift == ZERO


# ============================================================
# LOCKING / READS
# ============================================================


def lock_budget(user) -> Budget:
    """
    Acquire the per-user budget row lock (creating the row at 0 if absent).

    Must be called inside transaction.atomic; the lock is held until the
    outermost atomic block commits or rolls back.
    """
    if user is None:
        raise InvalidInputError("user is required")

    if not transaction.get_connection().in_atomic_block:
        raise transaction.TransactionManagementError(
            "lock_budget() must run inside transaction.atomic"
        )

    budget, _ = Budget.objects.select_for_update().get_or_create(user=user)
    return budget


def get_current_balance(user) -> Decimal:
    """Non-locking read of the cached balance (0 when the user has no budget row)."""
    amount = (
        Budget.objects.filter(user=user)
        .values_list("current_amount", flat=True)
        .first()
    )
    return amount if amount is not None else ZERO


def ledger_balance(user) -> Decimal:
    """Pure summation of the user's non-voided transactions."""
    return BudgetTransaction.objects.filter(
        user=user,
        deleted_at__isnull=True,
    ).aggregate(
        total=Coalesce(Sum("amount"), ZERO),
    )["total"]


def list_transactions(user, *, kind: str | None = None, include_voided: bool = False):
    qs = BudgetTransaction.objects.filter(user=user)
    if not include_voided:
        qs = qs.filter(deleted_at__isnull=True)
    if kind:
        qs = qs.filter(kind=kind)
    return qs.order_by("-created_at")


# ============================================================
# WRITES
# ============================================================


def _validate_kind(kind: str) -> str:
    kind = (kind or "").strip()
    if kind not in BudgetTransaction.Kind.values:
        raise InvalidInputError(f"Unknown transaction kind: {kind!r}")
    return kind


def assert_can_deduct(*, user, amount, error_class=InsufficientFundsError) -> Decimal:
    """
    Check (under the budget lock) that `amount` can be removed from the balance.

    Performs no writes apart from creating an empty budget row, which is
    rolled back together with the caller's atomic unit on failure.
    """
    required = to_money(amount)
    budget = lock_budget(user)
    current = budget.current_amount

    if current < required:
        logger.warning(
            "Budget check rejected",
            extra={"user_id": str(user.pk), "current": str(current), "required": str(required)},
        )
        raise error_class(current=current, required=required)

    return current


@transaction.atomic
def record_transaction(
    *,
    user,
    amount,
    kind: str,
    description: str = "",
    reference_id=None,
    reference_type: str = "",
) -> LedgerPosting:
    """
    Append one signed entry and move the running balance by the same amount.

    FLOW:
    1) Lock the user's budget row (created at 0 when absent)
    2) Reject deductions that would take the balance below zero
    3) Insert the BudgetTransaction
    4) current_amount += amount
    """
    amt = to_money(amount)
    kind = _validate_kind(kind)

    budget = lock_budget(user)
    previous = budget.current_amount

    # A balance that is already negative (manual correction) is tolerated,
    # but no new deduction may be applied on top of it.
    if amt < ZERO and previous + amt < ZERO:
        logger.warning(
            "Deduction rejected: insufficient budget",
            extra={
                "user_id": str(user.pk),
                "kind": kind,
                "current": str(previous),
                "required": str(-amt),
            },
        )
        raise InsufficientFundsError(current=previous, required=-amt)

    entry = BudgetTransaction.objects.create(
        user=user,
        amount=amt,
        kind=kind,
        description=(description or "").strip()[:255],
        reference_id=reference_id,
        reference_type=reference_type if reference_id else "",
    )

    budget.current_amount = previous + amt
    budget.save(update_fields=["current_amount", "updated_at"])

    logger.info(
        "Budget transaction recorded",
        extra={
            "user_id": str(user.pk),
            "transaction_id": str(entry.id),
            "kind": kind,
            "amount": str(amt),
            "previous_balance": str(previous),
            "updated_balance": str(budget.current_amount),
        },
    )

    return LedgerPosting(
        transaction=entry,
        previous_balance=previous,
        updated_balance=budget.current_amount,
    )


def top_up(*, user, amount, description: str | None = None) -> LedgerPosting:
    amt = to_money(amount)
    if amt <= ZERO:
        raise InvalidAmountError("Top-up amount must be positive")

    return record_transaction(
        user=user,
        amount=amt,
        kind=BudgetTransaction.Kind.TOP_UP,
        description=(description or "").strip() or DEFAULT_TOP_UP_DESCRIPTION,
    )


def attach_reference(entry: BudgetTransaction, *, reference_id, reference_type: str) -> BudgetTransaction:
    """Point an existing transaction at the row it paid for (audit traceability)."""
    entry.reference_id = reference_id
    entry.reference_type = reference_type
    entry.save(update_fields=["reference_id", "reference_type"])
    return entry


@transaction.atomic
def void_transaction(*, user, transaction_id, reason: str = "") -> LedgerPosting:
    """
    Correction mechanism: hide a transaction from the balance.

    The row stays in the log with deleted_at set and the cached balance moves
    by -amount. The result may be negative; new deductions are then refused
    until the balance is topped up again.
    """
    budget = lock_budget(user)

    entry = (
        BudgetTransaction.objects.select_for_update()
        .filter(pk=transaction_id, user=user, deleted_at__isnull=True)
        .first()
    )
    if entry is None:
        raise NotFoundOrUnauthorizedError("Transaction not found or unauthorized")

    previous = budget.current_amount

    entry.deleted_at = timezone.now()
    entry.save(update_fields=["deleted_at"])

    budget.current_amount = previous - entry.amount
    budget.save(update_fields=["current_amount", "updated_at"])

    log = logger.warning if budget.current_amount < ZERO else logger.info
    log(
        "Budget transaction voided",
        extra={
            "user_id": str(user.pk),
            "transaction_id": str(entry.id),
            "amount": str(entry.amount),
            "reason": (reason or "").strip(),
            "previous_balance": str(previous),
            "updated_balance": str(budget.current_amount),
        },
    )

    return LedgerPosting(
        transaction=entry,
        previous_balance=previous,
        updated_balance=budget.current_amount,
    )


@transaction.atomic
def reconcile_budget(*, user, fix: bool = False) -> ReconciliationResult:
    """Compare the cached balance with the log; optionally rewrite the cache."""
    budget = lock_budget(user)
    expected = ledger_balance(user)
    cached = budget.current_amount

    if cached == expected or not fix:
        if cached != expected:
            logger.warning(
                "Budget drift detected",
                extra={"user_id": str(user.pk), "cached": str(cached), "ledger": str(expected)},
            )
        return ReconciliationResult(user_id=user.pk, cached_balance=cached, ledger_balance=expected)

    budget.current_amount = expected
    budget.save(update_fields=["current_amount", "updated_at"])

    logger.warning(
        "Budget drift repaired",
        extra={"user_id": str(user.pk), "cached": str(cached), "ledger": str(expected)},
    )
    return ReconciliationResult(
        user_id=user.pk,
        cached_balance=cached,
        ledger_balance=expected,
        fixed=True,
    )
