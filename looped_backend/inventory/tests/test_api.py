# inventory/tests/test_api.py

import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from budget.services.ledger_service import top_up

User = get_user_model()


class InventoryApiTests(TestCase):
    """
    GUARANTEES:
    - Failures map to 402 / 409 / 404 / 400 with the canonical error body
    - Deleted or foreign rows answer 404
    """

    def setUp(self):
        self.user = User.objects.create_user(username="shop", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        top_up(user=self.user, amount="100000")

    def _create_batch(self, **overrides):
        payload = {
            "name": "Spring lot",
            "purchase_date": "2025-04-21",
            "items": [{"name": "Jacket", "purchase_price": "60000", "selling_price": "120000"}],
            "operational_costs": [{"name": "Shipping", "amount": "20000", "category": "logistics"}],
        }
        payload.update(overrides)
        return self.client.post(reverse("batches"), payload, format="json")

    def test_create_batch_returns_detail(self):
        res = self._create_batch()

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["total_cost"], "80000.00")
        self.assertEqual(len(res.data["items"]), 1)
        self.assertEqual(len(res.data["operational_costs"]), 1)

        budget = self.client.get(reverse("budget")).data
        self.assertEqual(budget["current_balance"], "20000.00")

    def test_unaffordable_batch_is_402(self):
        res = self._create_batch(
            items=[{"name": "Car", "purchase_price": "100000.01", "selling_price": "150000"}],
            operational_costs=[],
        )

        self.assertEqual(res.status_code, status.HTTP_402_PAYMENT_REQUIRED)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_FUNDS")
        self.assertEqual(res.data["error"]["required"], "100000.01")
        self.assertEqual(self.client.get(reverse("batches")).data["count"], 0)

    def test_sell_and_double_sell(self):
        item_id = self._create_batch().data["items"][0]["id"]

        res = self.client.post(reverse("item-sell", args=[item_id]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["sold_status"], "sold")

        res = self.client.post(reverse("item-sell", args=[item_id]))
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "ALREADY_SOLD")

    def test_reversal_without_funds_is_402(self):
        item_id = self._create_batch().data["items"][0]["id"]
        self.client.post(reverse("item-sell", args=[item_id]))
        # balance is now 140000; spend it down below the selling price
        self.client.post(reverse("operational-costs"), {"name": "Rent", "amount": "30000"}, format="json")

        res = self.client.post(reverse("item-reverse-sale", args=[item_id]))

        self.assertEqual(res.status_code, status.HTTP_402_PAYMENT_REQUIRED)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_FUNDS_FOR_REVERSAL")

    def test_batch_detail_includes_item_metrics(self):
        data = self._create_batch().data
        item_id = data["items"][0]["id"]
        self.client.post(reverse("item-sell", args=[item_id]))

        res = self.client.get(reverse("batch-detail", args=[data["id"]]))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        metrics = res.data["item_metrics"][item_id]
        self.assertEqual(metrics["allocated_cost"], "80000.00")
        self.assertEqual(metrics["profit"], "40000.00")
        self.assertEqual(metrics["roi_percentage"], "50.00")

    def test_update_batch_posts_delta(self):
        data = self._create_batch().data
        item_id = data["items"][0]["id"]

        res = self.client.put(
            reverse("batch-detail", args=[data["id"]]),
            {"items": [{"id": item_id, "purchase_price": "65000"}]},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total_cost"], "85000.00")
        self.assertEqual(self.client.get(reverse("budget")).data["current_balance"], "15000.00")

    def test_deleted_batch_is_404(self):
        batch_id = self._create_batch().data["id"]

        res = self.client.delete(reverse("batch-detail", args=[batch_id]))
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)

        res = self.client.get(reverse("batch-detail", args=[batch_id]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

        res = self.client.delete(reverse("batch-detail", args=[batch_id]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_foreign_item_is_404(self):
        item_id = self._create_batch().data["items"][0]["id"]
        other = User.objects.create_user(username="browser", password="pass")
        client = APIClient()
        client.force_authenticate(user=other)

        self.assertEqual(client.get(reverse("item-detail", args=[item_id])).status_code, 404)
        self.assertEqual(client.post(reverse("item-sell", args=[item_id])).status_code, 404)
        self.assertEqual(
            client.post(reverse("item-sell", args=[uuid.uuid4()])).status_code,
            status.HTTP_404_NOT_FOUND,
        )

    def test_zero_cost_is_400(self):
        res = self.client.post(reverse("operational-costs"), {"name": "Nothing", "amount": "0"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "INVALID_AMOUNT")

    def test_item_filters(self):
        batch = self._create_batch(
            items=[
                {"name": "Jacket", "purchase_price": "100", "selling_price": "250", "category": "Outerwear"},
                {"name": "Shirt", "purchase_price": "50", "selling_price": "90", "category": "Tops"},
            ],
        ).data
        jacket = next(i for i in batch["items"] if i["name"] == "Jacket")
        self.client.post(reverse("item-sell", args=[jacket["id"]]))

        sold = self.client.get(reverse("items"), {"sold_status": "sold"}).data
        self.assertEqual([i["name"] for i in sold["results"]], ["Jacket"])

        tops = self.client.get(reverse("items"), {"category": "tops"}).data
        self.assertEqual([i["name"] for i in tops["results"]], ["Shirt"])

    def test_report_without_items(self):
        res = self.client.get(reverse("reports"), {"start_date": "2020-01-01", "end_date": "2020-01-31"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total_items"], 0)
        self.assertEqual(Decimal(res.data["sell_through_rate"]), Decimal("0"))
        self.assertEqual(res.data["budget"]["current_balance"], "100000.00")

    def test_report_rejects_reversed_range(self):
        res = self.client.get(reverse("reports"), {"start_date": "2025-02-01", "end_date": "2025-01-01"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "INVALID_INPUT")

        res = self.client.get(reverse("reports"))
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_dashboard_monthly_series(self):
        item_id = self._create_batch().data["items"][0]["id"]
        self.client.post(reverse("item-sell", args=[item_id]))

        res = self.client.get(reverse("dashboard"))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total_sold"], 1)
        self.assertEqual(res.data["total_revenue"], Decimal("120000.00"))
        self.assertEqual(res.data["total_expenses"], Decimal("80000.00"))
        self.assertEqual(res.data["monthly"][0]["month"], "2025-04")
        self.assertEqual(res.data["monthly"][0]["profit"], Decimal("40000.00"))

    def test_batch_lines_without_prices_are_400(self):
        res = self._create_batch(items=[{"name": "Free"}], operational_costs=[])

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("items", res.data)
        self.assertEqual(self.client.get(reverse("budget")).data["current_balance"], "100000.00")

        batch_id = self._create_batch().data["id"]
        res = self.client.put(
            reverse("batch-detail", args=[batch_id]),
            {"items": [{"name": "Rug", "purchase_price": "10"}]},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("items", res.data)
        self.assertEqual(self.client.get(reverse("batch-detail", args=[batch_id])).data["total_items"], 1)

    def test_create_item_requires_selling_price(self):
        batch_id = self._create_batch().data["id"]

        res = self.client.post(
            reverse("items"),
            {"batch": batch_id, "name": "Scarf", "purchase_price": "500"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("selling_price", res.data)
