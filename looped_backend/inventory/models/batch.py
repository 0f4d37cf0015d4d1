# inventory/models/batch.py

"""
======================================================
PATH: inventory/models/batch.py
======================================================
BATCH MODEL

A purchase of several items at once, with running sales aggregates.

Aggregates:
- total_items / total_cost are set when the batch is bought and moved only
  by the inventory services, in the same atomic unit as the ledger entry
- total_sold / total_revenue are moved by sale registration and reversal
  with F() expressions under the budget lock
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from inventory.models.soft_delete import SoftDeleteModel


class Batch(SoftDeleteModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="batches",
    )

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    purchase_date = models.DateField(default=timezone.localdate)

    total_items = models.PositiveIntegerField(default=0)
    total_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_sold = models.PositiveIntegerField(default=0)
    total_revenue = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-purchase_date", "-created_at"]
        indexes = [
            models.Index(fields=["user", "purchase_date"], name="inv_batch_user_date_idx"),
            models.Index(fields=["deleted_at"], name="inv_batch_deleted_idx"),
        ]

    def __str__(self):
        return f"{self.name} | {self.purchase_date}"

    @property
    def remaining_items(self) -> int:
        return max(self.total_items - self.total_sold, 0)

    @property
    def gross_profit(self) -> Decimal:
        return (self.total_revenue or Decimal("0.00")) - (self.total_cost or Decimal("0.00"))
