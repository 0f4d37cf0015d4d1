# inventory/services/selectors.py

"""
OWNERSHIP-SCOPED LOOKUPS

Every lookup is filtered by owner and liveness, so a foreign, missing or
soft-deleted row is indistinguishable from one that never existed.

Locking variants must run inside transaction.atomic after lock_budget();
they keep the lock order Budget -> Batch -> Item/Cost.
"""

from __future__ import annotations

import uuid

from budget.services.exceptions import NotFoundOrUnauthorizedError
from inventory.models import Batch, Item, OperationalCost


def _as_uuid(value, label: str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError) as exc:
        raise NotFoundOrUnauthorizedError(f"{label} not found or unauthorized") from exc


def get_batch(user, batch_id) -> Batch:
    pk = _as_uuid(batch_id, "Batch")
    batch = Batch.objects.alive().filter(pk=pk, user=user).first()
    if batch is None:
        raise NotFoundOrUnauthorizedError("Batch not found or unauthorized")
    return batch


def get_batch_for_update(user, batch_id) -> Batch:
    pk = _as_uuid(batch_id, "Batch")
    batch = Batch.objects.select_for_update().alive().filter(pk=pk, user=user).first()
    if batch is None:
        raise NotFoundOrUnauthorizedError("Batch not found or unauthorized")
    return batch


def get_item_for_update(user, item_id, *, batch: Batch | None = None) -> Item:
    """
    Lock an item and its batch (batch first).

    When `batch` is given (already locked by the caller) the item must
    belong to it.
    """
    pk = _as_uuid(item_id, "Item")

    qs = Item.objects.alive().filter(pk=pk, user=user)
    if batch is not None:
        qs = qs.filter(batch=batch)

    batch_id = qs.values_list("batch_id", flat=True).first()
    if batch_id is None:
        raise NotFoundOrUnauthorizedError("Item not found or unauthorized")

    if batch is None:
        batch = get_batch_for_update(user, batch_id)

    item = qs.select_for_update().first()
    if item is None:
        raise NotFoundOrUnauthorizedError("Item not found or unauthorized")

    item.batch = batch
    return item


def get_cost_for_update(user, cost_id) -> OperationalCost:
    pk = _as_uuid(cost_id, "Operational cost")

    qs = OperationalCost.objects.alive().filter(pk=pk, user=user)
    batch_id = qs.values_list("batch_id", flat=True).first()
    if batch_id is not None:
        get_batch_for_update(user, batch_id)

    cost = qs.select_for_update().first()
    if cost is None:
        raise NotFoundOrUnauthorizedError("Operational cost not found or unauthorized")
    return cost
