# inventory/tests/test_batches.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from budget.models import BudgetTransaction
from budget.services.exceptions import (
    InsufficientFundsError,
    InvalidAmountError,
    InvalidInputError,
    NotFoundOrUnauthorizedError,
)
from budget.services.ledger_service import get_current_balance, ledger_balance, top_up
from inventory.models import Batch, Item, OperationalCost
from inventory.services.batch_service import create_batch, update_batch
from inventory.services.item_service import register_item_sale

User = get_user_model()


def _buy(user, *, items=None, costs=None, name="Spring lot"):
    return create_batch(
        user=user,
        name=name,
        purchase_date=date(2025, 4, 21),
        items=items if items is not None else [
            {"name": "Jacket", "purchase_price": "60000", "selling_price": "120000"},
        ],
        operational_costs=costs if costs is not None else [
            {"name": "Shipping", "amount": "20000", "category": "logistics"},
        ],
    )


class BatchPurchaseTests(TestCase):
    """
    GUARANTEES:
    - A batch purchase is one unit: ledger entry + batch + items + costs
    - A refused purchase leaves no rows and an unchanged balance
    - Repeating a refused purchase gives the same refusal and the same state
    """

    def setUp(self):
        self.user = User.objects.create_user(username="buyer", password="pass")

    def test_purchase_deducts_total_and_creates_rows(self):
        top_up(user=self.user, amount="100000")

        result = _buy(self.user)
        batch = result.batch

        self.assertEqual(get_current_balance(self.user), Decimal("20000.00"))
        self.assertEqual(batch.total_cost, Decimal("80000.00"))
        self.assertEqual(batch.total_items, 1)
        self.assertEqual(batch.total_sold, 0)

        item = Item.objects.get(batch=batch)
        self.assertEqual(item.sold_status, Item.STATUS_UNSOLD)
        self.assertEqual(item.margin_value, Decimal("60000.00"))
        self.assertEqual(item.margin_percentage, Decimal("100.00"))
        self.assertEqual(item.total_cost, Decimal("60000.00"))

        cost = OperationalCost.objects.get(batch=batch)
        self.assertEqual(cost.date, date(2025, 4, 21))
        self.assertEqual(cost.category, "logistics")

        entry = result.posting.transaction
        entry.refresh_from_db()
        self.assertEqual(entry.kind, BudgetTransaction.Kind.BATCH_PURCHASE)
        self.assertEqual(entry.amount, Decimal("-80000.00"))
        self.assertEqual(entry.description, "Batch purchase: Spring lot")
        self.assertEqual(entry.reference_id, batch.id)
        self.assertEqual(entry.reference_type, "batch")

        self.assertEqual(get_current_balance(self.user), ledger_balance(self.user))

    def test_refused_purchase_is_all_or_nothing_and_repeatable(self):
        top_up(user=self.user, amount="20000")

        for _ in range(2):
            with self.assertRaises(InsufficientFundsError) as ctx:
                _buy(self.user)

            self.assertEqual(ctx.exception.current, Decimal("20000.00"))
            self.assertEqual(ctx.exception.required, Decimal("80000.00"))

            self.assertEqual(get_current_balance(self.user), Decimal("20000.00"))
            self.assertFalse(Batch.objects.exists())
            self.assertFalse(Item.objects.exists())
            self.assertFalse(OperationalCost.objects.exists())
            self.assertEqual(BudgetTransaction.objects.count(), 1)

    def test_invalid_lines_are_rejected_before_the_ledger(self):
        top_up(user=self.user, amount="1000")

        with self.assertRaises(InvalidInputError):
            create_batch(user=self.user, name="  ")

        with self.assertRaises(InvalidInputError):
            _buy(self.user, items=[{"purchase_price": "10"}], costs=[])

        with self.assertRaises(InvalidAmountError):
            _buy(self.user, items=[{"name": "Bad", "purchase_price": "-1", "selling_price": "5"}], costs=[])

        with self.assertRaises(InvalidAmountError):
            _buy(self.user, items=[], costs=[{"name": "Free", "amount": "0"}])

        self.assertEqual(BudgetTransaction.objects.count(), 1)
        self.assertFalse(Batch.objects.exists())

    def test_costs_default_to_general_category(self):
        top_up(user=self.user, amount="1000")
        result = _buy(self.user, items=[], costs=[{"name": "Fees", "amount": "5"}])

        self.assertEqual(result.operational_costs[0].category, "general")

    def test_item_lines_must_carry_both_prices(self):
        top_up(user=self.user, amount="1000")

        for line in (
            {"name": "Free"},
            {"name": "No resale price", "purchase_price": "10"},
            {"name": "No cost", "selling_price": "10"},
            {"name": "Null", "purchase_price": None, "selling_price": "10"},
        ):
            with self.assertRaises(InvalidInputError):
                _buy(self.user, items=[line], costs=[])

        self.assertFalse(Batch.objects.exists())
        self.assertEqual(get_current_balance(self.user), Decimal("1000.00"))


class BatchUpdateTests(TestCase):
    """
    GUARANTEES:
    - Only the cost delta is posted; no change means no ledger entry
    - Unlisted items and costs stay untouched
    - Sold items follow the same edit rules as a direct item update
    """

    def setUp(self):
        self.user = User.objects.create_user(username="editor", password="pass")
        top_up(user=self.user, amount="1000")
        result = _buy(
            self.user,
            items=[
                {"name": "Lamp", "purchase_price": "100", "selling_price": "180"},
                {"name": "Vase", "purchase_price": "200", "selling_price": "260"},
            ],
            costs=[{"name": "Van", "amount": "50"}],
        )
        self.batch = result.batch
        self.lamp = Item.objects.get(batch=self.batch, name="Lamp")
        self.vase = Item.objects.get(batch=self.batch, name="Vase")
        self.van = OperationalCost.objects.get(batch=self.batch)

    def _batch_updates(self):
        return BudgetTransaction.objects.filter(
            user=self.user,
            description__startswith="Batch update:",
        )

    def test_price_increase_and_new_lines_post_one_delta(self):
        result = update_batch(
            user=self.user,
            batch_id=self.batch.id,
            items=[
                {"id": self.lamp.id, "purchase_price": "150"},
                {"name": "Rug", "purchase_price": "80", "selling_price": "120"},
            ],
            operational_costs=[{"name": "Fuel", "amount": "20"}],
        )

        self.assertEqual(result.cost_delta, Decimal("150.00"))
        self.batch.refresh_from_db()
        self.assertEqual(self.batch.total_cost, Decimal("500.00"))
        self.assertEqual(self.batch.total_items, 3)

        entry = self._batch_updates().get()
        self.assertEqual(entry.amount, Decimal("-150.00"))
        self.assertEqual(entry.kind, BudgetTransaction.Kind.BATCH_PURCHASE)
        self.assertEqual(entry.reference_id, self.batch.id)

        self.assertEqual(get_current_balance(self.user), Decimal("500.00"))
        self.vase.refresh_from_db()
        self.assertEqual(self.vase.purchase_price, Decimal("200.00"))

    def test_price_decrease_credits_the_difference(self):
        update_batch(
            user=self.user,
            batch_id=self.batch.id,
            items=[{"id": self.vase.id, "purchase_price": "150"}],
            operational_costs=[{"id": self.van.id, "amount": "30"}],
        )

        entry = self._batch_updates().get()
        self.assertEqual(entry.amount, Decimal("70.00"))
        self.assertEqual(get_current_balance(self.user), Decimal("720.00"))

    def test_header_only_update_posts_nothing(self):
        result = update_batch(user=self.user, batch_id=self.batch.id, name="Renamed", description="x")

        self.assertIsNone(result.posting)
        self.assertFalse(self._batch_updates().exists())
        self.batch.refresh_from_db()
        self.assertEqual(self.batch.name, "Renamed")
        self.assertEqual(get_current_balance(self.user), Decimal("650.00"))

    def test_refused_increase_changes_nothing(self):
        with self.assertRaises(InsufficientFundsError):
            update_batch(
                user=self.user,
                batch_id=self.batch.id,
                name="Too pricey",
                items=[{"id": self.lamp.id, "purchase_price": "5000"}],
            )

        self.lamp.refresh_from_db()
        self.batch.refresh_from_db()
        self.assertEqual(self.lamp.purchase_price, Decimal("100.00"))
        self.assertEqual(self.batch.name, "Spring lot")
        self.assertEqual(self.batch.total_cost, Decimal("350.00"))
        self.assertEqual(get_current_balance(self.user), Decimal("650.00"))

    def test_sold_item_price_change_posts_adjustment(self):
        register_item_sale(user=self.user, item_id=self.lamp.id)

        update_batch(
            user=self.user,
            batch_id=self.batch.id,
            items=[{"id": self.lamp.id, "selling_price": "200"}],
        )

        adjustment = BudgetTransaction.objects.get(description="Sale price adjustment for: Lamp")
        self.assertEqual(adjustment.amount, Decimal("20.00"))
        self.assertEqual(adjustment.kind, BudgetTransaction.Kind.ITEM_SALE)

        self.batch.refresh_from_db()
        self.assertEqual(self.batch.total_revenue, Decimal("200.00"))
        self.assertEqual(self.batch.total_sold, 1)
        self.assertEqual(get_current_balance(self.user), ledger_balance(self.user))

    def test_marking_item_sold_through_batch_update_registers_sale(self):
        update_batch(
            user=self.user,
            batch_id=self.batch.id,
            items=[{"id": self.vase.id, "sold_status": "sold"}],
        )

        self.vase.refresh_from_db()
        self.batch.refresh_from_db()
        self.assertEqual(self.vase.sold_status, Item.STATUS_SOLD)
        self.assertEqual(self.batch.total_sold, 1)
        self.assertEqual(self.batch.total_revenue, Decimal("260.00"))
        self.assertEqual(get_current_balance(self.user), Decimal("910.00"))

    def test_items_of_other_batches_are_rejected(self):
        other = _buy(self.user, items=[{"name": "Stool", "purchase_price": "10", "selling_price": "25"}], costs=[], name="Other")
        stool = other.items[0]

        with self.assertRaises(NotFoundOrUnauthorizedError):
            update_batch(
                user=self.user,
                batch_id=self.batch.id,
                items=[{"id": stool.id, "purchase_price": "1"}],
            )

    def test_foreign_batch_is_not_found(self):
        intruder = User.objects.create_user(username="intruder", password="pass")

        with self.assertRaises(NotFoundOrUnauthorizedError):
            update_batch(user=intruder, batch_id=self.batch.id, name="Mine now")

    def test_new_lines_must_carry_both_prices(self):
        with self.assertRaises(InvalidInputError):
            update_batch(user=self.user, batch_id=self.batch.id, items=[{"name": "Rug"}])

        self.assertEqual(Item.objects.filter(batch=self.batch).count(), 2)
        self.assertEqual(get_current_balance(self.user), Decimal("650.00"))

    def test_existing_line_cannot_null_a_price(self):
        with self.assertRaises(InvalidInputError):
            update_batch(
                user=self.user,
                batch_id=self.batch.id,
                items=[{"id": self.lamp.id, "purchase_price": None}],
            )

        self.lamp.refresh_from_db()
        self.assertEqual(self.lamp.purchase_price, Decimal("100.00"))
        self.assertEqual(get_current_balance(self.user), Decimal("650.00"))
