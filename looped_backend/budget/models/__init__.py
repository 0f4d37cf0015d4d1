# budget/models/__init__.py

"""
BUDGET MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Do NOT import services from models anywhere (models must stay pure).
"""

from budget.models.budget import Budget
from budget.models.transaction import BudgetTransaction

__all__ = [
    "Budget",
    "BudgetTransaction",
]
