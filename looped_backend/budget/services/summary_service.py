# budget/services/summary_service.py

"""
BUDGET SUMMARY (READ-ONLY)

Answers: "what is my balance and where did it come from?"

RULES:
- READ-ONLY: no writes, ever
- Statistics cover non-voided transactions only, so the grand total of
  all kinds equals the ledger sum (and therefore the cached balance)
"""

from __future__ import annotations

from django.db.models import Count, Sum
from django.db.models.functions import Coalesce

from budget.models import Budget, BudgetTransaction
from budget.services.money import ZERO


def _kind_statistics(user) -> dict:
    rows = (
        BudgetTransaction.objects.filter(user=user, deleted_at__isnull=True)
        .values("kind")
        .annotate(total=Coalesce(Sum("amount"), ZERO), count=Count("id"))
        .order_by()
    )
    by_kind = {row["kind"]: row for row in rows}

    stats = {}
    for kind in BudgetTransaction.Kind.values:
        row = by_kind.get(kind)
        stats[kind] = {
            "total": row["total"] if row else ZERO,
            "count": row["count"] if row else 0,
        }
    return stats


def get_budget_summary(user) -> dict:
    """
    Output format:
    {
        "current_balance": Decimal,
        "ledger_balance": Decimal,
        "budget_created_at": datetime | None,
        "budget_updated_at": datetime | None,
        "statistics": {
            "by_kind": {kind: {"total": Decimal, "count": int}, ...},
            "transaction_count": int,
        },
    }
    """
    budget = Budget.objects.filter(user=user).first()
    by_kind = _kind_statistics(user)

    ledger_total = sum((v["total"] for v in by_kind.values()), ZERO)

    return {
        "current_balance": budget.current_amount if budget else ZERO,
        "ledger_balance": ledger_total,
        "budget_created_at": budget.created_at if budget else None,
        "budget_updated_at": budget.updated_at if budget else None,
        "statistics": {
            "by_kind": by_kind,
            "transaction_count": sum(v["count"] for v in by_kind.values()),
        },
    }
