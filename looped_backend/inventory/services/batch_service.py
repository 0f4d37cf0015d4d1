# inventory/services/batch_service.py

"""
======================================================
PATH: inventory/services/batch_service.py
======================================================
BATCH PURCHASE SERVICE

create_batch():
- total = sum(item purchase prices) + sum(operational cost amounts)
- ONE atomic unit: ledger deduction, batch row, item rows, cost rows,
  then the batch id is attached to the ledger entry
- InsufficientFundsError leaves no new rows anywhere

update_batch():
- lines with an `id` edit existing live rows of the batch
- lines without an `id` add rows
- rows not listed stay untouched
- the batch cost is recomputed from live rows and ONLY the delta is posted
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from budget.models import BudgetTransaction
from budget.services.exceptions import InvalidAmountError, InvalidInputError
from budget.services.ledger_service import (
    LedgerPosting,
    attach_reference,
    lock_budget,
    record_transaction,
)
from budget.services.money import ZERO, to_money
from inventory.models import Batch, Item, OperationalCost
from inventory.services.item_service import (
    apply_sale,
    apply_item_changes,
    clean_name,
    clean_status,
    require_price,
)
from inventory.services.selectors import get_batch_for_update, get_item_for_update

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchPurchaseResult:
    batch: Batch
    posting: LedgerPosting
    items: list = field(default_factory=list)
    operational_costs: list = field(default_factory=list)


@dataclass(frozen=True)
class BatchUpdateResult:
    batch: Batch
    cost_delta: Decimal
    posting: LedgerPosting | None = None


# ============================================================
# LINE NORMALIZATION
# ============================================================


def _clean_item_line(line: dict) -> dict:
    if not isinstance(line, dict):
        raise InvalidInputError("Each item must be an object")
    return {
        "name": clean_name(line.get("name"), "item name"),
        "category": (line.get("category") or "").strip(),
        "purchase_price": require_price(line.get("purchase_price"), "purchase_price"),
        "selling_price": require_price(line.get("selling_price"), "selling_price"),
        "image_ref": (line.get("image_ref") or "").strip(),
    }


def _clean_cost_amount(value) -> Decimal:
    amount = to_money(value)
    if amount <= ZERO:
        raise InvalidAmountError("Operational cost amount must be greater than zero")
    return amount


def _clean_cost_line(line: dict, *, default_date: date) -> dict:
    if not isinstance(line, dict):
        raise InvalidInputError("Each operational cost must be an object")
    return {
        "name": clean_name(line.get("name"), "operational cost name"),
        "description": (line.get("description") or "").strip(),
        "amount": _clean_cost_amount(line.get("amount")),
        "category": (line.get("category") or "").strip() or OperationalCost.DEFAULT_CATEGORY,
        "date": line.get("date") or default_date,
    }


def _live_batch_cost(batch: Batch) -> tuple[int, Decimal]:
    item_count = Item.objects.alive().filter(batch=batch).count()
    item_total = Item.objects.alive().filter(batch=batch).aggregate(
        total=Coalesce(Sum("purchase_price"), ZERO),
    )["total"]
    cost_total = OperationalCost.objects.alive().filter(batch=batch).aggregate(
        total=Coalesce(Sum("amount"), ZERO),
    )["total"]
    return item_count, to_money(item_total) + to_money(cost_total)


# ============================================================
# CREATE
# ============================================================


@transaction.atomic
def create_batch(
    *,
    user,
    name,
    purchase_date: date | None = None,
    items=(),
    operational_costs=(),
    description: str = "",
) -> BatchPurchaseResult:
    """
    FLOW:
    1) Validate every line before touching the ledger
    2) Ledger -total, kind batch_purchase ("Batch purchase: <name>")
    3) Batch row with totals, item rows (unsold), cost rows
    4) Attach the batch id to the ledger entry
    """
    name = clean_name(name)
    purchase_date = purchase_date or timezone.localdate()

    item_lines = [_clean_item_line(line) for line in (items or [])]
    cost_lines = [_clean_cost_line(line, default_date=purchase_date) for line in (operational_costs or [])]

    total = sum((line["purchase_price"] for line in item_lines), ZERO) + sum(
        (line["amount"] for line in cost_lines), ZERO
    )

    lock_budget(user)

    posting = record_transaction(
        user=user,
        amount=-total,
        kind=BudgetTransaction.Kind.BATCH_PURCHASE,
        description=f"Batch purchase: {name}",
    )

    batch = Batch.objects.create(
        user=user,
        name=name,
        description=(description or "").strip(),
        purchase_date=purchase_date,
        total_items=len(item_lines),
        total_cost=total,
    )

    created_items = [
        Item.objects.create(batch=batch, user=user, **line)
        for line in item_lines
    ]
    created_costs = [
        OperationalCost.objects.create(batch=batch, user=user, **line)
        for line in cost_lines
    ]

    attach_reference(
        posting.transaction,
        reference_id=batch.id,
        reference_type=BudgetTransaction.ReferenceType.BATCH,
    )

    logger.info(
        "Batch purchased",
        extra={
            "user_id": str(user.pk),
            "batch_id": str(batch.id),
            "items": len(created_items),
            "operational_costs": len(created_costs),
            "total_cost": str(total),
        },
    )

    return BatchPurchaseResult(
        batch=batch,
        posting=posting,
        items=created_items,
        operational_costs=created_costs,
    )


# ============================================================
# UPDATE
# ============================================================


def _update_cost_line(*, user, batch: Batch, line: dict):
    cost = (
        OperationalCost.objects.select_for_update()
        .alive()
        .filter(pk=line["id"], batch=batch, user=user)
        .first()
    )
    if cost is None:
        raise InvalidInputError(f"Operational cost {line['id']} does not belong to this batch")

    if "name" in line:
        cost.name = clean_name(line["name"], "operational cost name")
    if "description" in line:
        cost.description = (line["description"] or "").strip()
    if "amount" in line:
        cost.amount = _clean_cost_amount(line["amount"])
    if "category" in line:
        cost.category = (line["category"] or "").strip() or OperationalCost.DEFAULT_CATEGORY
    if line.get("date"):
        cost.date = line["date"]
    cost.save()


@transaction.atomic
def update_batch(
    *,
    user,
    batch_id,
    name=None,
    description=None,
    purchase_date: date | None = None,
    items=None,
    operational_costs=None,
) -> BatchUpdateResult:
    """
    FLOW:
    1) Lock budget -> batch
    2) Header fields, then item lines (edit rules of item_service), then cost lines
    3) new_total = live item purchase prices + live batch costs
    4) delta = new_total - stored total_cost; post -delta when non-zero
    """
    lock_budget(user)
    batch = get_batch_for_update(user, batch_id)

    if name is not None:
        batch.name = clean_name(name)
    if description is not None:
        batch.description = (description or "").strip()
    if purchase_date is not None:
        batch.purchase_date = purchase_date

    for line in items or []:
        if not isinstance(line, dict):
            raise InvalidInputError("Each item must be an object")

        if line.get("id"):
            item = get_item_for_update(user, line["id"], batch=batch)
            changes = {k: v for k, v in line.items() if k != "id"}
            apply_item_changes(
                user=user,
                item=item,
                batch=batch,
                changes=changes,
                post_purchase_delta=False,
            )
            item.save()
            continue

        status = clean_status(line.get("sold_status"))
        item = Item.objects.create(batch=batch, user=user, **_clean_item_line(line))
        if status == Item.STATUS_SOLD:
            apply_sale(user=user, item=item, batch=batch)
            item.save(update_fields=["sold_status", "updated_at"])

    for line in operational_costs or []:
        if not isinstance(line, dict):
            raise InvalidInputError("Each operational cost must be an object")

        if line.get("id"):
            _update_cost_line(user=user, batch=batch, line=line)
        else:
            OperationalCost.objects.create(
                batch=batch,
                user=user,
                **_clean_cost_line(line, default_date=batch.purchase_date),
            )

    item_count, new_total = _live_batch_cost(batch)

    # sales posted above moved total_sold / total_revenue with F(); reload them
    batch.refresh_from_db(fields=["total_cost", "total_sold", "total_revenue"])
    delta = new_total - batch.total_cost

    posting = None
    if delta != ZERO:
        posting = record_transaction(
            user=user,
            amount=-delta,
            kind=BudgetTransaction.Kind.BATCH_PURCHASE,
            description=f"Batch update: {batch.name}",
            reference_id=batch.id,
            reference_type=BudgetTransaction.ReferenceType.BATCH,
        )

    batch.total_items = item_count
    batch.total_cost = new_total
    batch.save(
        update_fields=[
            "name",
            "description",
            "purchase_date",
            "total_items",
            "total_cost",
            "updated_at",
        ]
    )

    logger.info(
        "Batch updated",
        extra={"user_id": str(user.pk), "batch_id": str(batch.id), "cost_delta": str(delta)},
    )

    return BatchUpdateResult(batch=batch, cost_delta=delta, posting=posting)
