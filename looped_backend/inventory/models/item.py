# inventory/models/item.py

from decimal import Decimal
import uuid

from django.conf import settings
from django.db import models

from inventory.models.soft_delete import SoftDeleteModel
from inventory.services.pricing import compute_margin


class Item(SoftDeleteModel):
    """
    One unit bought inside a batch.

    Margins are derived from the two prices and refreshed on every save;
    total_cost mirrors purchase_price.
    """

    STATUS_UNSOLD = "unsold"
    STATUS_SOLD = "sold"

    STATUS_CHOICES = [
        (STATUS_UNSOLD, "Unsold"),
        (STATUS_SOLD, "Sold"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    batch = models.ForeignKey(
        "inventory.Batch",
        on_delete=models.PROTECT,
        related_name="items",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="inventory_items",
    )

    name = models.CharField(max_length=255)
    category = models.CharField(max_length=100, blank=True, default="")

    purchase_price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    selling_price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    margin_value = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    margin_percentage = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))

    sold_status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_UNSOLD)
    total_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    image_ref = models.CharField(max_length=500, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "sold_status"], name="inv_item_user_status_idx"),
            models.Index(fields=["batch", "deleted_at"], name="inv_item_batch_deleted_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.sold_status})"

    @property
    def is_sold(self) -> bool:
        return self.sold_status == self.STATUS_SOLD

    def refresh_margins(self):
        self.margin_value, self.margin_percentage = compute_margin(
            self.purchase_price, self.selling_price
        )
        self.total_cost = self.purchase_price

    def save(self, *args, **kwargs):
        self.refresh_margins()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {
                "margin_value",
                "margin_percentage",
                "total_cost",
            }
        return super().save(*args, **kwargs)
