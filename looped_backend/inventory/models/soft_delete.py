# inventory/models/soft_delete.py

"""
SOFT DELETE SUPPORT

Batches, items and operational costs are never physically removed; they are
hidden by stamping `deleted_at`. Every read path must go through `alive()`.
"""

from django.db import models
from django.utils import timezone


class SoftDeleteQuerySet(models.QuerySet):
    def alive(self):
        return self.filter(deleted_at__isnull=True)

    def deleted(self):
        return self.filter(deleted_at__isnull=False)

    def soft_delete(self, *, at=None) -> int:
        """Stamp every live row in the queryset with one timestamp."""
        return self.alive().update(deleted_at=at or timezone.now())


class SoftDeleteModel(models.Model):
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = SoftDeleteQuerySet.as_manager()

    class Meta:
        abstract = True

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
