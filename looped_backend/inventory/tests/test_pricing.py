# inventory/tests/test_pricing.py

from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from inventory.services.pricing import compute_margin, item_metrics


class PricingTests(SimpleTestCase):
    def test_margin_value_and_percentage(self):
        value, pct = compute_margin("60000", "120000")

        self.assertEqual(value, Decimal("60000.00"))
        self.assertEqual(pct, Decimal("100.00"))

    def test_free_item_has_zero_percentage(self):
        value, pct = compute_margin("0", "50")

        self.assertEqual(value, Decimal("50.00"))
        self.assertEqual(pct, Decimal("0"))

    def test_sold_item_metrics_spread_costs_evenly(self):
        item = SimpleNamespace(purchase_price=Decimal("60000"), selling_price=Decimal("120000"), sold_status="sold")

        metrics = item_metrics(item, total_operational_costs=Decimal("20000"), items_count=1)

        self.assertEqual(metrics.allocated_cost, Decimal("80000.00"))
        self.assertEqual(metrics.profit, Decimal("40000.00"))
        self.assertEqual(metrics.true_margin_percentage, Decimal("33.33"))
        self.assertEqual(metrics.roi_percentage, Decimal("50.00"))

    def test_unsold_item_has_no_profit_yet(self):
        item = SimpleNamespace(purchase_price=Decimal("10"), selling_price=Decimal("30"), sold_status="unsold")

        metrics = item_metrics(item, total_operational_costs=Decimal("9"), items_count=3)

        self.assertEqual(metrics.allocated_cost, Decimal("13.00"))
        self.assertEqual(metrics.profit, Decimal("0"))
        self.assertEqual(metrics.roi_percentage, Decimal("0"))
