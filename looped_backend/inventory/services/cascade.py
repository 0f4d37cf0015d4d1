# inventory/services/cascade.py

"""
SOFT-DELETE CASCADE

Deleting a batch hides the batch and every live item and operational cost
attached to it, all stamped with ONE timestamp in one atomic unit.

No ledger entries are written: the purchase is not refunded and registered
sales stay earned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from django.db import transaction
from django.utils import timezone

from budget.services.ledger_service import lock_budget
from inventory.models import Batch, Item, OperationalCost
from inventory.services.selectors import get_batch_for_update

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CascadeResult:
    batch: Batch
    deleted_at: datetime
    items_deleted: int
    operational_costs_deleted: int


@transaction.atomic
def soft_delete_batch(*, user, batch_id) -> CascadeResult:
    lock_budget(user)
    batch = get_batch_for_update(user, batch_id)

    now = timezone.now()

    items_deleted = Item.objects.filter(batch=batch).soft_delete(at=now)
    costs_deleted = OperationalCost.objects.filter(batch=batch).soft_delete(at=now)

    batch.deleted_at = now
    batch.save(update_fields=["deleted_at", "updated_at"])

    logger.info(
        "Batch deleted",
        extra={
            "user_id": str(user.pk),
            "batch_id": str(batch.id),
            "items_deleted": items_deleted,
            "operational_costs_deleted": costs_deleted,
        },
    )

    return CascadeResult(
        batch=batch,
        deleted_at=now,
        items_deleted=items_deleted,
        operational_costs_deleted=costs_deleted,
    )
