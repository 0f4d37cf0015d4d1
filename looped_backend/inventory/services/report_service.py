# inventory/services/report_service.py

"""
REPORTS (READ-ONLY)

build_report(start, end):
- batches purchased in the range, items created in the range, costs dated
  in the range (live rows only)
- revenue = selling prices of sold items
- expenses = operational costs
- sell-through = sold / total items * 100 (0 when there are no items)

dashboard_stats():
- totals across every live batch, with a per-month series keyed by the
  batch purchase month
"""

from __future__ import annotations

from collections import OrderedDict
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from budget.services.exceptions import InvalidInputError
from budget.services.money import TWOPLACES, ZERO
from budget.services.summary_service import get_budget_summary
from inventory.models import Batch, Item, OperationalCost
from inventory.services.pricing import item_metrics


def _day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    tz = timezone.get_current_timezone()
    return (
        timezone.make_aware(datetime.combine(start, time.min), tz),
        timezone.make_aware(datetime.combine(end, time.max), tz),
    )


def _sell_through(sold: int, total: int) -> Decimal:
    if total <= 0:
        return ZERO
    return (Decimal(sold) / Decimal(total) * Decimal("100")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def build_report(user, *, start: date, end: date) -> dict:
    if start is None or end is None:
        raise InvalidInputError("start_date and end_date are required")
    if start > end:
        raise InvalidInputError("start_date must be on or before end_date")

    created_from, created_to = _day_bounds(start, end)

    batches = Batch.objects.alive().filter(
        user=user,
        purchase_date__gte=start,
        purchase_date__lte=end,
    )
    items = Item.objects.alive().filter(
        user=user,
        created_at__gte=created_from,
        created_at__lte=created_to,
    )
    costs = OperationalCost.objects.alive().filter(
        user=user,
        date__gte=start,
        date__lte=end,
    )

    sold = items.filter(sold_status=Item.STATUS_SOLD)

    total_revenue = sold.aggregate(total=Coalesce(Sum("selling_price"), ZERO))["total"]
    total_expenses = costs.aggregate(total=Coalesce(Sum("amount"), ZERO))["total"]
    total_items = items.count()
    sold_items = sold.count()

    return {
        "start_date": start,
        "end_date": end,
        "total_revenue": total_revenue,
        "total_expenses": total_expenses,
        "net_profit": total_revenue - total_expenses,
        "total_items": total_items,
        "sold_items": sold_items,
        "sell_through_rate": _sell_through(sold_items, total_items),
        "batches": list(batches),
        "items": list(items),
        "operational_costs": list(costs),
        "budget": get_budget_summary(user),
    }


def dashboard_stats(user) -> dict:
    """
    Expenses per batch = every live item's purchase price + the batch's live
    operational costs; revenue counts sold items only.
    """
    batches = (
        Batch.objects.alive()
        .filter(user=user)
        .order_by("purchase_date", "created_at")
    )

    totals = {
        "total_revenue": ZERO,
        "total_expenses": ZERO,
        "total_sold": 0,
        "total_items": 0,
    }
    monthly = OrderedDict()

    for batch in batches:
        items = Item.objects.alive().filter(batch=batch)
        revenue = items.filter(sold_status=Item.STATUS_SOLD).aggregate(
            total=Coalesce(Sum("selling_price"), ZERO)
        )["total"]
        purchases = items.aggregate(total=Coalesce(Sum("purchase_price"), ZERO))["total"]
        costs = OperationalCost.objects.alive().filter(batch=batch).aggregate(
            total=Coalesce(Sum("amount"), ZERO)
        )["total"]
        expenses = purchases + costs

        totals["total_revenue"] += revenue
        totals["total_expenses"] += expenses
        totals["total_sold"] += items.filter(sold_status=Item.STATUS_SOLD).count()
        totals["total_items"] += items.count()

        month = batch.purchase_date.strftime("%Y-%m")
        bucket = monthly.setdefault(month, {"month": month, "income": ZERO, "expenses": ZERO})
        bucket["income"] += revenue
        bucket["expenses"] += expenses

    for bucket in monthly.values():
        bucket["profit"] = bucket["income"] - bucket["expenses"]

    totals["net_profit"] = totals["total_revenue"] - totals["total_expenses"]
    totals["monthly"] = list(monthly.values())
    totals["budget"] = get_budget_summary(user)
    return totals


def batch_item_metrics(batch: Batch) -> dict:
    """Per-item metrics for a batch detail view, keyed by item id."""
    items = list(Item.objects.alive().filter(batch=batch))
    costs = OperationalCost.objects.alive().filter(batch=batch).aggregate(
        total=Coalesce(Sum("amount"), ZERO)
    )["total"]

    return {
        str(item.id): item_metrics(item, total_operational_costs=costs, items_count=len(items))
        for item in items
    }
