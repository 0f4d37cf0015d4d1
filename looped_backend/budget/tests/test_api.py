# budget/tests/test_api.py

import uuid

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from budget.services.ledger_service import record_transaction, top_up

User = get_user_model()


class BudgetApiTests(TestCase):
    """
    GUARANTEES:
    - Callers only ever see their own budget
    - Business failures use the canonical error body
      {"error": {"code": ..., "message": ...}}
    """

    def setUp(self):
        self.user = User.objects.create_user(username="api-owner", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_requires_authentication(self):
        anonymous = APIClient()
        res = anonymous.get(reverse("budget"))
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_summary_for_new_user(self):
        res = self.client.get(reverse("budget"))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["current_balance"], "0.00")
        self.assertEqual(res.data["statistics"]["transaction_count"], 0)

    def test_top_up_returns_posting(self):
        res = self.client.post(reverse("budget"), {"amount": "150.00"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["previous_balance"], "0.00")
        self.assertEqual(res.data["updated_balance"], "150.00")
        self.assertEqual(res.data["transaction"]["kind"], "top_up")

        summary = self.client.get(reverse("budget")).data
        self.assertEqual(summary["current_balance"], "150.00")

    def test_non_positive_top_up_is_invalid_amount(self):
        res = self.client.post(reverse("budget"), {"amount": "-5.00"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "INVALID_AMOUNT")

    def test_transaction_history_filters_by_kind(self):
        top_up(user=self.user, amount="100.00")
        record_transaction(user=self.user, amount="-25.00", kind="operational_cost")

        res = self.client.get(reverse("budget-transactions"), {"kind": "operational_cost"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["amount"], "-25.00")

    def test_unknown_kind_filter_is_rejected(self):
        res = self.client.get(reverse("budget-transactions"), {"kind": "gift"})

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "INVALID_INPUT")

    def test_history_never_shows_other_users_entries(self):
        other = User.objects.create_user(username="someone-else", password="pass")
        top_up(user=other, amount="999.00")

        res = self.client.get(reverse("budget-transactions"))
        self.assertEqual(res.data["count"], 0)

    def test_void_transaction(self):
        entry = top_up(user=self.user, amount="40.00").transaction

        res = self.client.post(
            reverse("budget-transaction-void", args=[entry.id]),
            {"reason": "entered twice"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["updated_balance"], "0.00")
        self.assertTrue(res.data["transaction"]["is_voided"])

        history = self.client.get(reverse("budget-transactions")).data
        self.assertEqual(history["count"], 0)

        with_voided = self.client.get(reverse("budget-transactions"), {"include_voided": "true"}).data
        self.assertEqual(with_voided["count"], 1)

    def test_void_unknown_transaction_is_not_found(self):
        res = self.client.post(
            reverse("budget-transaction-void", args=[uuid.uuid4()]),
            {},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")
