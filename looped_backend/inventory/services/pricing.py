# inventory/services/pricing.py

"""
ITEM PRICING HELPERS (PURE)

No database access; inputs are plain values or unsaved/saved Item rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from budget.services.money import TWOPLACES, ZERO, to_money

HUNDRED = Decimal("100")


def _pct(numerator: Decimal, denominator: Decimal) -> Decimal:
    if denominator <= ZERO:
        return ZERO
    return (numerator / denominator * HUNDRED).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def compute_margin(purchase_price, selling_price) -> tuple[Decimal, Decimal]:
    """Return (margin_value, margin_percentage); percentage is 0 for a free item."""
    purchase = to_money(purchase_price)
    selling = to_money(selling_price)
    value = selling - purchase
    return value, _pct(value, purchase)


@dataclass(frozen=True)
class ItemMetrics:
    allocated_cost: Decimal
    profit: Decimal
    true_margin_percentage: Decimal
    roi_percentage: Decimal


def item_metrics(item, *, total_operational_costs, items_count: int) -> ItemMetrics:
    """
    Per-item economics with the batch's operational costs spread evenly.

    - allocated_cost = purchase_price + costs / items_count
    - profit, true margin (% of selling price) and ROI (% of allocated cost)
      are zero until the item is sold
    """
    costs = to_money(total_operational_costs)
    share = (costs / items_count).quantize(TWOPLACES, rounding=ROUND_HALF_UP) if items_count > 0 else ZERO
    allocated = to_money(item.purchase_price) + share

    if item.sold_status != "sold":
        return ItemMetrics(
            allocated_cost=allocated,
            profit=ZERO,
            true_margin_percentage=ZERO,
            roi_percentage=ZERO,
        )

    selling = to_money(item.selling_price)
    profit = selling - allocated
    return ItemMetrics(
        allocated_cost=allocated,
        profit=profit,
        true_margin_percentage=_pct(profit, selling),
        roi_percentage=_pct(profit, allocated),
    )
