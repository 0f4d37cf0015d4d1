# inventory/services/item_service.py

"""
======================================================
PATH: inventory/services/item_service.py
======================================================
ITEM SERVICE (SALE STATE MACHINE + ITEM EDITS)

Every public function is ONE atomic unit:
- lock the owner's budget row, then the batch, then the item
- validate the lifecycle transition
- move the item status, the batch aggregates and the ledger together

Edit rules for prices and status (shared with batch updates):
- sold item, selling price changed, still sold:
    ledger adjustment of (new - old), kind item_sale, batch revenue += delta
- sold -> unsold:
    full reversal at the OLD price, then the new price is stored
- unsold -> sold:
    new price stored, then the sale is registered at that price
- purchase price changed:
    ledger -(delta), kind batch_purchase, batch total_cost += delta
    (batch updates post one combined delta instead)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from budget.models import BudgetTransaction
from budget.services.exceptions import (
    InsufficientFundsForReversalError,
    InvalidAmountError,
    InvalidInputError,
)
from budget.services.ledger_service import (
    LedgerPosting,
    assert_can_deduct,
    attach_reference,
    lock_budget,
    record_transaction,
)
from budget.services.money import ZERO, to_money
from inventory.models import Batch, Item
from inventory.services.item_lifecycle import validate_transition
from inventory.services.selectors import get_batch_for_update, get_item_for_update

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name",
    "category",
    "purchase_price",
    "selling_price",
    "sold_status",
    "image_ref",
)


@dataclass(frozen=True)
class ItemSaleResult:
    item: Item
    posting: LedgerPosting


# ============================================================
# INPUT NORMALIZATION
# ============================================================


def clean_name(value, label: str = "name") -> str:
    name = (value or "").strip() if isinstance(value, str) else ""
    if not name:
        raise InvalidInputError(f"{label} is required")
    return name


def clean_price(value, label: str) -> Decimal:
    amount = to_money(value)
    if amount < ZERO:
        raise InvalidAmountError(f"{label} cannot be negative")
    return amount


def require_price(value, label: str) -> Decimal:
    """Like clean_price, but a missing value is an error instead of 0."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInputError(f"{label} is required")
    return clean_price(value, label)


def clean_status(value) -> str:
    status = str(value or Item.STATUS_UNSOLD).strip().lower()
    if status not in (Item.STATUS_SOLD, Item.STATUS_UNSOLD):
        raise InvalidInputError(f"Unknown sold_status: {value!r}")
    return status


# ============================================================
# SALE / REVERSAL PRIMITIVES (caller holds the locks and saves the item)
# ============================================================


def _sale_description(item: Item, batch: Batch) -> str:
    return f"Item sale: {item.name} from batch: {batch.name}"


def apply_sale(*, user, item: Item, batch: Batch) -> LedgerPosting:
    validate_transition(item=item, target_status=Item.STATUS_SOLD)
    price = to_money(item.selling_price)

    item.sold_status = Item.STATUS_SOLD

    Batch.objects.filter(pk=batch.pk).update(
        total_sold=F("total_sold") + 1,
        total_revenue=F("total_revenue") + price,
        updated_at=timezone.now(),
    )

    return record_transaction(
        user=user,
        amount=price,
        kind=BudgetTransaction.Kind.ITEM_SALE,
        description=_sale_description(item, batch),
        reference_id=item.id,
        reference_type=BudgetTransaction.ReferenceType.ITEM,
    )


def apply_reversal(*, user, item: Item, batch: Batch) -> LedgerPosting:
    validate_transition(item=item, target_status=Item.STATUS_UNSOLD)
    price = to_money(item.selling_price)

    # Checked before any write so a refused reversal leaves no trace
    assert_can_deduct(user=user, amount=price, error_class=InsufficientFundsForReversalError)

    item.sold_status = Item.STATUS_UNSOLD

    Batch.objects.filter(pk=batch.pk).update(
        total_sold=F("total_sold") - 1,
        total_revenue=F("total_revenue") - price,
        updated_at=timezone.now(),
    )

    return record_transaction(
        user=user,
        amount=-price,
        kind=BudgetTransaction.Kind.ITEM_SALE_REVERSAL,
        description=f"Item sale reversal: {item.name} from batch: {batch.name}",
        reference_id=item.id,
        reference_type=BudgetTransaction.ReferenceType.ITEM,
    )


def apply_item_changes(*, user, item: Item, batch: Batch, changes: dict, post_purchase_delta: bool) -> Decimal:
    """
    Apply an edit to a locked item following the module's edit rules.

    Returns the purchase price delta. When `post_purchase_delta` is False the
    caller is responsible for posting it (batch updates fold every line into
    one entry).
    """
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise InvalidInputError(f"Unknown item fields: {', '.join(sorted(unknown))}")

    if "name" in changes:
        item.name = clean_name(changes["name"])
    if "category" in changes:
        item.category = (changes["category"] or "").strip()
    if "image_ref" in changes:
        item.image_ref = (changes["image_ref"] or "").strip()

    old_purchase = to_money(item.purchase_price)
    old_selling = to_money(item.selling_price)
    old_status = item.sold_status

    new_purchase = require_price(changes["purchase_price"], "purchase_price") if "purchase_price" in changes else old_purchase
    new_selling = require_price(changes["selling_price"], "selling_price") if "selling_price" in changes else old_selling
    new_status = clean_status(changes["sold_status"]) if "sold_status" in changes else old_status

    # --------------------------------------------------
    # 1. STATUS / SELLING PRICE
    # --------------------------------------------------
    if old_status == Item.STATUS_SOLD and new_status == Item.STATUS_SOLD:
        price_delta = new_selling - old_selling
        item.selling_price = new_selling
        if price_delta != ZERO:
            Batch.objects.filter(pk=batch.pk).update(
                total_revenue=F("total_revenue") + price_delta,
                updated_at=timezone.now(),
            )
            record_transaction(
                user=user,
                amount=price_delta,
                kind=BudgetTransaction.Kind.ITEM_SALE,
                description=f"Sale price adjustment for: {item.name}",
                reference_id=item.id,
                reference_type=BudgetTransaction.ReferenceType.ITEM,
            )

    elif old_status == Item.STATUS_SOLD:
        apply_reversal(user=user, item=item, batch=batch)
        item.selling_price = new_selling

    elif new_status == Item.STATUS_SOLD:
        item.selling_price = new_selling
        apply_sale(user=user, item=item, batch=batch)

    else:
        item.selling_price = new_selling

    # --------------------------------------------------
    # 2. PURCHASE PRICE
    # --------------------------------------------------
    purchase_delta = new_purchase - old_purchase
    item.purchase_price = new_purchase

    if post_purchase_delta and purchase_delta != ZERO:
        record_transaction(
            user=user,
            amount=-purchase_delta,
            kind=BudgetTransaction.Kind.BATCH_PURCHASE,
            description=f"Item update: {item.name}",
            reference_id=item.id,
            reference_type=BudgetTransaction.ReferenceType.ITEM,
        )
        Batch.objects.filter(pk=batch.pk).update(
            total_cost=F("total_cost") + purchase_delta,
            updated_at=timezone.now(),
        )

    return purchase_delta


# ============================================================
# PUBLIC OPERATIONS
# ============================================================


@transaction.atomic
def register_item_sale(*, user, item_id) -> ItemSaleResult:
    """
    FLOW:
    1) Lock budget -> batch -> item
    2) unsold -> sold (AlreadySoldError otherwise)
    3) Batch total_sold += 1, total_revenue += selling_price
    4) Ledger +selling_price, kind item_sale, referencing the item
    """
    lock_budget(user)
    item = get_item_for_update(user, item_id)

    posting = apply_sale(user=user, item=item, batch=item.batch)
    item.save(update_fields=["sold_status", "updated_at"])

    return ItemSaleResult(item=item, posting=posting)


@transaction.atomic
def reverse_item_sale(*, user, item_id) -> ItemSaleResult:
    """
    FLOW:
    1) Lock budget -> batch -> item
    2) sold -> unsold (AlreadyUnsoldError otherwise)
    3) balance >= selling_price (InsufficientFundsForReversalError otherwise)
    4) Batch aggregates decremented, ledger -selling_price
    """
    lock_budget(user)
    item = get_item_for_update(user, item_id)

    posting = apply_reversal(user=user, item=item, batch=item.batch)
    item.save(update_fields=["sold_status", "updated_at"])

    return ItemSaleResult(item=item, posting=posting)


@transaction.atomic
def create_item(
    *,
    user,
    batch_id,
    name,
    purchase_price,
    selling_price,
    category: str = "",
    sold_status: str = Item.STATUS_UNSOLD,
    image_ref: str = "",
) -> Item:
    """Buy one more item into an existing batch."""
    name = clean_name(name)
    purchase = require_price(purchase_price, "purchase_price")
    selling = require_price(selling_price, "selling_price")
    status = clean_status(sold_status)

    lock_budget(user)
    batch = get_batch_for_update(user, batch_id)

    posting = None
    if purchase != ZERO:
        posting = record_transaction(
            user=user,
            amount=-purchase,
            kind=BudgetTransaction.Kind.BATCH_PURCHASE,
            description=f"Item purchase: {name} for batch: {batch.name}",
        )

    item = Item.objects.create(
        batch=batch,
        user=user,
        name=name,
        category=(category or "").strip(),
        purchase_price=purchase,
        selling_price=selling,
        image_ref=(image_ref or "").strip(),
    )

    if posting is not None:
        attach_reference(
            posting.transaction,
            reference_id=item.id,
            reference_type=BudgetTransaction.ReferenceType.ITEM,
        )

    Batch.objects.filter(pk=batch.pk).update(
        total_items=F("total_items") + 1,
        total_cost=F("total_cost") + purchase,
        updated_at=timezone.now(),
    )

    if status == Item.STATUS_SOLD:
        apply_sale(user=user, item=item, batch=batch)
        item.save(update_fields=["sold_status", "updated_at"])

    logger.info(
        "Item created",
        extra={"user_id": str(user.pk), "item_id": str(item.id), "batch_id": str(batch.id)},
    )
    return item


@transaction.atomic
def update_item(*, user, item_id, **changes) -> Item:
    lock_budget(user)
    item = get_item_for_update(user, item_id)

    apply_item_changes(
        user=user,
        item=item,
        batch=item.batch,
        changes=changes,
        post_purchase_delta=True,
    )
    item.save()

    logger.info(
        "Item updated",
        extra={"user_id": str(user.pk), "item_id": str(item.id), "fields": sorted(changes)},
    )
    return item


@transaction.atomic
def delete_item(*, user, item_id) -> Item:
    """
    Soft-delete one item and take it out of its batch aggregates.

    No ledger entry: the purchase stays spent and a registered sale stays
    earned.
    """
    lock_budget(user)
    item = get_item_for_update(user, item_id)

    sold = item.sold_status == Item.STATUS_SOLD
    Batch.objects.filter(pk=item.batch_id).update(
        total_items=F("total_items") - 1,
        total_cost=F("total_cost") - item.purchase_price,
        total_sold=F("total_sold") - (1 if sold else 0),
        total_revenue=F("total_revenue") - (item.selling_price if sold else ZERO),
        updated_at=timezone.now(),
    )

    item.deleted_at = timezone.now()
    item.save(update_fields=["deleted_at", "updated_at"])

    logger.info(
        "Item deleted",
        extra={"user_id": str(user.pk), "item_id": str(item.id), "batch_id": str(item.batch_id)},
    )
    return item
