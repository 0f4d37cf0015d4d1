# budget/apps.py

"""
BUDGET APP CONFIG

Budget ledger module:
- Per-user running balance (Budget)
- Append-only money log (BudgetTransaction)
- Ledger engine services (record, top-up, void, reconcile, summary)
"""

from django.apps import AppConfig


class BudgetConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "budget"
    verbose_name = "Budget Ledger"
