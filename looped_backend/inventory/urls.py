# inventory/urls.py

from django.urls import path

from inventory.api.views import (
    BatchDetailView,
    BatchListCreateView,
    DashboardView,
    ItemDetailView,
    ItemListCreateView,
    ItemReverseSaleView,
    ItemSellView,
    OperationalCostDetailView,
    OperationalCostListCreateView,
    ReportView,
)

urlpatterns = [
    # Batches
    path("batches/", BatchListCreateView.as_view(), name="batches"),
    path("batches/<uuid:batch_id>/", BatchDetailView.as_view(), name="batch-detail"),
    # Items
    path("items/", ItemListCreateView.as_view(), name="items"),
    path("items/<uuid:item_id>/", ItemDetailView.as_view(), name="item-detail"),
    path("items/<uuid:item_id>/sell/", ItemSellView.as_view(), name="item-sell"),
    path("items/<uuid:item_id>/reverse-sale/", ItemReverseSaleView.as_view(), name="item-reverse-sale"),
    # Operational costs
    path("operational-costs/", OperationalCostListCreateView.as_view(), name="operational-costs"),
    path(
        "operational-costs/<uuid:cost_id>/",
        OperationalCostDetailView.as_view(),
        name="operational-cost-detail",
    ),
    # Reports
    path("reports/", ReportView.as_view(), name="reports"),
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
]
