# budget/models/transaction.py

"""
======================================================
PATH: budget/models/transaction.py
======================================================
BUDGET TRANSACTION MODEL (TRANSACTION LOG)

One signed money movement for one user.

Guarantees:
- Append-only: amount, kind, description and owner never change after insert
- Positive amount = inflow (top-up, sale), negative = outflow (purchase, cost)
- The only later writes allowed are:
    * reference_id / reference_type (audit back-reference, set once the
      referenced batch/item/cost row exists)
    * deleted_at (correction void; excluded from balance and statistics)
- Rows are never physically deleted
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class BudgetTransaction(models.Model):
    class Kind(models.TextChoices):
        TOP_UP = "top_up", "Top-up"
        BATCH_PURCHASE = "batch_purchase", "Batch purchase"
        OPERATIONAL_COST = "operational_cost", "Operational cost"
        OPERATIONAL_COST_REFUND = "operational_cost_refund", "Operational cost refund"
        ITEM_SALE = "item_sale", "Item sale"
        ITEM_SALE_REVERSAL = "item_sale_reversal", "Item sale reversal"
        OTHER = "other", "Other"

    class ReferenceType(models.TextChoices):
        NONE = "", "None"
        BATCH = "batch", "Batch"
        ITEM = "item", "Item"
        OPERATIONAL_COST = "operational_cost", "Operational cost"

    MUTABLE_FIELDS = frozenset({"reference_id", "reference_type", "deleted_at"})

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="budget_transactions",
    )

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Signed amount: positive = inflow, negative = outflow",
    )

    kind = models.CharField(max_length=32, choices=Kind.choices)

    description = models.CharField(max_length=255, blank=True, default="")

    # Non-owning back-reference to a Batch / Item / OperationalCost (lookup only)
    reference_id = models.UUIDField(null=True, blank=True)
    reference_type = models.CharField(
        max_length=32,
        choices=ReferenceType.choices,
        blank=True,
        default=ReferenceType.NONE,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Budget Transaction"
        verbose_name_plural = "Budget Transactions"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="budget_tx_user_created_idx"),
            models.Index(fields=["user", "kind"], name="budget_tx_user_kind_idx"),
            models.Index(fields=["reference_id"], name="budget_tx_reference_idx"),
            models.Index(fields=["kind"], name="budget_tx_kind_idx"),
        ]

    def __str__(self):
        return f"{self.kind} {self.amount} ({self.user_id})"

    @property
    def is_voided(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_inflow(self) -> bool:
        return (self.amount or Decimal("0.00")) > 0

    def clean(self):
        if self.kind not in self.Kind.values:
            raise ValidationError({"kind": f"Unknown transaction kind: {self.kind!r}"})

        if self.amount is None:
            raise ValidationError({"amount": "amount is required"})

        if self.reference_id is None and self.reference_type:
            raise ValidationError("reference_type requires reference_id")

    def save(self, *args, **kwargs):
        # UUID pk is populated before the first save, so use _state.adding
        if self._state.adding:
            self.full_clean()
            return super().save(*args, **kwargs)

        update_fields = kwargs.get("update_fields")
        if not update_fields or not set(update_fields) <= self.MUTABLE_FIELDS:
            raise ValidationError(
                "BudgetTransaction records are immutable; only the reference "
                "and deleted_at may be written after creation"
            )
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("BudgetTransaction records cannot be deleted; void them instead")
