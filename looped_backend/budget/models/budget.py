# budget/models/budget.py

"""
BUDGET (BALANCE STORE)

One running total per user.

Invariant:
    current_amount == SUM(BudgetTransaction.amount)
                      for the user where deleted_at IS NULL

The row is written ONLY by budget.services.ledger_service while holding a
row lock (select_for_update), so two concurrent deductions can never both
pass the balance check against a stale value.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models


class Budget(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="budget",
    )

    current_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Budget"
        verbose_name_plural = "Budgets"
        ordering = ["-updated_at"]

    def __str__(self):
        return f"Budget {self.user_id}: {self.current_amount}"
