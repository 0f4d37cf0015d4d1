# inventory/models/operational_cost.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from inventory.models.soft_delete import SoftDeleteModel


class OperationalCost(SoftDeleteModel):
    """
    An expense (shipping, fees, rent...) that is not an item purchase.

    May be attached to a batch; batch-attached costs count toward the
    batch's total_cost.
    """

    DEFAULT_CATEGORY = "general"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    batch = models.ForeignKey(
        "inventory.Batch",
        on_delete=models.PROTECT,
        related_name="operational_costs",
        null=True,
        blank=True,
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="operational_costs",
    )

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    date = models.DateField(default=timezone.localdate)
    category = models.CharField(max_length=100, default=DEFAULT_CATEGORY)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(fields=["user", "date"], name="inv_cost_user_date_idx"),
            models.Index(fields=["batch", "deleted_at"], name="inv_cost_batch_deleted_idx"),
        ]

    def __str__(self):
        return f"{self.name} | {self.amount}"

    def clean(self):
        if self.amount is None or self.amount <= Decimal("0.00"):
            raise ValidationError({"amount": "amount must be greater than zero"})
