# inventory/services/operations.py

"""
======================================================
PATH: inventory/services/operations.py
======================================================
OPERATION API

The single entry point for callers outside the service layer (API views,
management commands, scripts). Every function:
- takes the caller identity explicitly (`user`)
- runs exactly one atomic service call
- returns OperationResult; business-rule failures are values, not raises
"""

from __future__ import annotations

from budget.services import ledger_service, summary_service
from budget.services.results import OperationResult, run_operation
from inventory.services import batch_service, cascade, cost_service, item_service


# ============================================================
# BUDGET
# ============================================================


def top_up(*, user, amount, description=None) -> OperationResult:
    return run_operation(
        "top_up",
        ledger_service.top_up,
        user=user,
        amount=amount,
        description=description,
    )


def get_budget_summary(*, user) -> OperationResult:
    return run_operation("get_budget_summary", summary_service.get_budget_summary, user=user)


def void_transaction(*, user, transaction_id, reason: str = "") -> OperationResult:
    return run_operation(
        "void_transaction",
        ledger_service.void_transaction,
        user=user,
        transaction_id=transaction_id,
        reason=reason,
    )


# ============================================================
# BATCHES
# ============================================================


def create_batch(*, user, **payload) -> OperationResult:
    return run_operation("create_batch", batch_service.create_batch, user=user, **payload)


def update_batch(*, user, batch_id, **payload) -> OperationResult:
    return run_operation(
        "update_batch",
        batch_service.update_batch,
        user=user,
        batch_id=batch_id,
        **payload,
    )


def delete_batch(*, user, batch_id) -> OperationResult:
    return run_operation("delete_batch", cascade.soft_delete_batch, user=user, batch_id=batch_id)


# ============================================================
# ITEMS
# ============================================================


def create_item(*, user, batch_id, **payload) -> OperationResult:
    return run_operation(
        "create_item",
        item_service.create_item,
        user=user,
        batch_id=batch_id,
        **payload,
    )


def update_item(*, user, item_id, **changes) -> OperationResult:
    return run_operation(
        "update_item",
        item_service.update_item,
        user=user,
        item_id=item_id,
        **changes,
    )


def delete_item(*, user, item_id) -> OperationResult:
    return run_operation("delete_item", item_service.delete_item, user=user, item_id=item_id)


def register_item_sale(*, user, item_id) -> OperationResult:
    return run_operation(
        "register_item_sale",
        item_service.register_item_sale,
        user=user,
        item_id=item_id,
    )


def reverse_item_sale(*, user, item_id) -> OperationResult:
    return run_operation(
        "reverse_item_sale",
        item_service.reverse_item_sale,
        user=user,
        item_id=item_id,
    )


# ============================================================
# OPERATIONAL COSTS
# ============================================================


def add_operational_cost(*, user, **payload) -> OperationResult:
    return run_operation(
        "add_operational_cost",
        cost_service.add_operational_cost,
        user=user,
        **payload,
    )


def update_operational_cost(*, user, cost_id, **payload) -> OperationResult:
    return run_operation(
        "update_operational_cost",
        cost_service.update_operational_cost,
        user=user,
        cost_id=cost_id,
        **payload,
    )


def delete_operational_cost(*, user, cost_id) -> OperationResult:
    return run_operation(
        "delete_operational_cost",
        cost_service.delete_operational_cost,
        user=user,
        cost_id=cost_id,
    )
