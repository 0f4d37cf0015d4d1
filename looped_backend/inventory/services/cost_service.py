# inventory/services/cost_service.py

"""
======================================================
PATH: inventory/services/cost_service.py
======================================================
OPERATIONAL COST LIFECYCLE

add:    ledger -amount (operational_cost), row created, reference attached
update: amount delta posted (increase: operational_cost, decrease:
        operational_cost_refund)
delete: ledger +amount (operational_cost_refund), then the row is stamped
        deleted; if either step fails the cost stays live

Batch-attached costs move the batch's total_cost in the same unit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from budget.models import BudgetTransaction
from budget.services.exceptions import InvalidAmountError
from budget.services.ledger_service import (
    LedgerPosting,
    attach_reference,
    lock_budget,
    record_transaction,
)
from budget.services.money import ZERO, to_money
from inventory.models import Batch, OperationalCost
from inventory.services.item_service import clean_name
from inventory.services.selectors import get_batch_for_update, get_cost_for_update

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostPostingResult:
    cost: OperationalCost
    posting: LedgerPosting | None = None


def _clean_amount(value) -> Decimal:
    amount = to_money(value)
    if amount <= ZERO:
        raise InvalidAmountError("Operational cost amount must be greater than zero")
    return amount


def _clean_category(value) -> str:
    return (value or "").strip() or OperationalCost.DEFAULT_CATEGORY


def _move_batch_cost(batch_id, delta: Decimal):
    if batch_id is None or delta == ZERO:
        return
    Batch.objects.filter(pk=batch_id).update(
        total_cost=F("total_cost") + delta,
        updated_at=timezone.now(),
    )


@transaction.atomic
def add_operational_cost(
    *,
    user,
    name,
    amount,
    category: str | None = None,
    batch_id=None,
    date: date | None = None,
    description: str = "",
) -> CostPostingResult:
    name = clean_name(name)
    amt = _clean_amount(amount)
    category = _clean_category(category)

    lock_budget(user)
    batch = get_batch_for_update(user, batch_id) if batch_id else None

    posting = record_transaction(
        user=user,
        amount=-amt,
        kind=BudgetTransaction.Kind.OPERATIONAL_COST,
        description=f"Operational cost: {name} ({category})",
    )

    cost = OperationalCost.objects.create(
        user=user,
        batch=batch,
        name=name,
        description=(description or "").strip(),
        amount=amt,
        category=category,
        date=date or timezone.localdate(),
    )

    attach_reference(
        posting.transaction,
        reference_id=cost.id,
        reference_type=BudgetTransaction.ReferenceType.OPERATIONAL_COST,
    )
    _move_batch_cost(cost.batch_id, amt)

    logger.info(
        "Operational cost added",
        extra={"user_id": str(user.pk), "cost_id": str(cost.id), "amount": str(amt)},
    )
    return CostPostingResult(cost=cost, posting=posting)


@transaction.atomic
def update_operational_cost(
    *,
    user,
    cost_id,
    name=None,
    amount=None,
    category=None,
    date: date | None = None,
    description=None,
) -> CostPostingResult:
    lock_budget(user)
    cost = get_cost_for_update(user, cost_id)

    if name is not None:
        cost.name = clean_name(name)
    if category is not None:
        cost.category = _clean_category(category)
    if description is not None:
        cost.description = (description or "").strip()
    if date is not None:
        cost.date = date

    posting = None
    if amount is not None:
        new_amount = _clean_amount(amount)
        delta = new_amount - cost.amount

        if delta > ZERO:
            posting = record_transaction(
                user=user,
                amount=-delta,
                kind=BudgetTransaction.Kind.OPERATIONAL_COST,
                description=f"Operational cost update: {cost.name} ({cost.category})",
                reference_id=cost.id,
                reference_type=BudgetTransaction.ReferenceType.OPERATIONAL_COST,
            )
        elif delta < ZERO:
            posting = record_transaction(
                user=user,
                amount=-delta,
                kind=BudgetTransaction.Kind.OPERATIONAL_COST_REFUND,
                description=f"Operational cost update refund: {cost.name} ({cost.category})",
                reference_id=cost.id,
                reference_type=BudgetTransaction.ReferenceType.OPERATIONAL_COST,
            )

        cost.amount = new_amount
        _move_batch_cost(cost.batch_id, delta)

    cost.save()

    logger.info(
        "Operational cost updated",
        extra={"user_id": str(user.pk), "cost_id": str(cost.id)},
    )
    return CostPostingResult(cost=cost, posting=posting)


@transaction.atomic
def delete_operational_cost(*, user, cost_id) -> CostPostingResult:
    lock_budget(user)
    cost = get_cost_for_update(user, cost_id)

    posting = record_transaction(
        user=user,
        amount=cost.amount,
        kind=BudgetTransaction.Kind.OPERATIONAL_COST_REFUND,
        description=f"Operational cost refund: {cost.name} ({cost.category})",
        reference_id=cost.id,
        reference_type=BudgetTransaction.ReferenceType.OPERATIONAL_COST,
    )

    cost.deleted_at = timezone.now()
    cost.save(update_fields=["deleted_at", "updated_at"])
    _move_batch_cost(cost.batch_id, -cost.amount)

    logger.info(
        "Operational cost deleted",
        extra={"user_id": str(user.pk), "cost_id": str(cost.id), "refund": str(cost.amount)},
    )
    return CostPostingResult(cost=cost, posting=posting)
