# budget/urls.py

from django.urls import path

from budget.api.views import BudgetTransactionListView, BudgetView, VoidTransactionView

urlpatterns = [
    path("", BudgetView.as_view(), name="budget"),
    path("transactions/", BudgetTransactionListView.as_view(), name="budget-transactions"),
    path(
        "transactions/<uuid:transaction_id>/void/",
        VoidTransactionView.as_view(),
        name="budget-transaction-void",
    ),
]
