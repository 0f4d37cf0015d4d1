# inventory/tests/test_cascade.py

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone

from budget.models import BudgetTransaction
from budget.services.exceptions import NotFoundOrUnauthorizedError
from budget.services.ledger_service import get_current_balance, top_up
from inventory.models import Batch, Item, OperationalCost
from inventory.services.batch_service import create_batch
from inventory.services.cascade import soft_delete_batch
from inventory.services.item_service import register_item_sale

User = get_user_model()


class BatchCascadeTests(TestCase):
    """
    GUARANTEES:
    - Batch, items and costs disappear together with one timestamp
    - No ledger entries are written
    - Rows deleted earlier keep their own timestamp
    """

    def setUp(self):
        self.user = User.objects.create_user(username="cascade", password="pass")
        top_up(user=self.user, amount="1000")
        result = create_batch(
            user=self.user,
            name="Winter lot",
            items=[
                {"name": "Boots", "purchase_price": "100", "selling_price": "300"},
                {"name": "Gloves", "purchase_price": "20", "selling_price": "50"},
            ],
            operational_costs=[{"name": "Cart", "amount": "30"}],
        )
        self.batch = result.batch
        self.items = result.items
        self.cost = result.operational_costs[0]

    def test_cascade_stamps_one_timestamp(self):
        register_item_sale(user=self.user, item_id=self.items[0].id)
        balance = get_current_balance(self.user)
        entries = BudgetTransaction.objects.count()

        result = soft_delete_batch(user=self.user, batch_id=self.batch.id)

        self.assertEqual(result.items_deleted, 2)
        self.assertEqual(result.batch.pk, self.batch.pk)
        self.assertEqual(result.batch.deleted_at, result.deleted_at)
        self.assertTrue(result.batch.is_deleted)
        self.assertEqual(result.operational_costs_deleted, 1)

        stamps = set(Item.objects.filter(batch=self.batch).values_list("deleted_at", flat=True))
        stamps |= set(OperationalCost.objects.filter(batch=self.batch).values_list("deleted_at", flat=True))
        stamps.add(Batch.objects.get(pk=self.batch.pk).deleted_at)
        self.assertEqual(stamps, {result.deleted_at})

        self.assertEqual(get_current_balance(self.user), balance)
        self.assertEqual(BudgetTransaction.objects.count(), entries)

        self.assertFalse(Batch.objects.alive().filter(pk=self.batch.pk).exists())
        self.assertEqual(Item.objects.alive().filter(batch=self.batch).count(), 0)
        self.assertEqual(Batch.objects.deleted().filter(pk=self.batch.pk).count(), 1)

    def test_previously_deleted_rows_keep_their_timestamp(self):
        earlier = timezone.now() - timedelta(days=3)
        Item.objects.filter(pk=self.items[1].pk).update(deleted_at=earlier)

        result = soft_delete_batch(user=self.user, batch_id=self.batch.id)

        self.assertEqual(result.items_deleted, 1)
        self.assertEqual(Item.objects.get(pk=self.items[1].pk).deleted_at, earlier)
        self.assertEqual(Item.objects.get(pk=self.items[0].pk).deleted_at, result.deleted_at)

    def test_repeat_delete_is_not_found(self):
        soft_delete_batch(user=self.user, batch_id=self.batch.id)

        with self.assertRaises(NotFoundOrUnauthorizedError):
            soft_delete_batch(user=self.user, batch_id=self.batch.id)

    def test_foreign_batch_is_not_found(self):
        other = User.objects.create_user(username="not-owner", password="pass")

        with self.assertRaises(NotFoundOrUnauthorizedError):
            soft_delete_batch(user=other, batch_id=self.batch.id)

        self.assertIsNone(Batch.objects.get(pk=self.batch.pk).deleted_at)
        self.assertEqual(get_current_balance(self.user), Decimal("850.00"))
