# inventory/api/views.py

"""
PATH: inventory/api/views.py

INVENTORY API (batches, items, operational costs, reports)

- Every query is scoped to request.user and to live (non-deleted) rows
- Every write goes through inventory.services.operations and returns either
  the fresh DB truth or the canonical error body
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from budget.api.errors import error_response, ledger_error_response
from budget.api.serializers import BudgetSummarySerializer
from budget.services.exceptions import NotFoundOrUnauthorizedError
from inventory.api.filters import ItemFilter, OperationalCostFilter
from inventory.api.serializers import (
    BatchCreateSerializer,
    BatchDetailSerializer,
    BatchSerializer,
    BatchUpdateSerializer,
    ItemCreateSerializer,
    ItemSerializer,
    ItemUpdateSerializer,
    OperationalCostCreateSerializer,
    OperationalCostSerializer,
    OperationalCostUpdateSerializer,
    ReportQuerySerializer,
)
from inventory.models import Batch, Item, OperationalCost
from inventory.services import operations
from inventory.services.report_service import build_report, dashboard_stats
from inventory.services.selectors import get_batch


def _not_found(label: str):
    return ledger_error_response(NotFoundOrUnauthorizedError(f"{label} not found or unauthorized"))


# ============================================================
# BATCHES
# ============================================================


class BatchListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = BatchCreateSerializer

    def get_queryset(self):
        return Batch.objects.alive().filter(user=self.request.user)

    @extend_schema(tags=["batches"], responses=BatchSerializer(many=True))
    def get(self, request, *args, **kwargs):
        page = self.paginate_queryset(self.get_queryset())
        return self.get_paginated_response(BatchSerializer(page, many=True).data)

    @extend_schema(
        tags=["batches"],
        request=BatchCreateSerializer,
        responses={201: BatchDetailSerializer, 400: dict, 402: dict},
    )
    def post(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        result = operations.create_batch(user=request.user, **s.validated_data)
        if not result.ok:
            return ledger_error_response(result.error)

        batch = get_batch(request.user, result.value.batch.id)
        return Response(BatchDetailSerializer(batch).data, status=status.HTTP_201_CREATED)


class BatchDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = BatchUpdateSerializer

    def _batch(self, request, batch_id):
        return Batch.objects.alive().filter(pk=batch_id, user=request.user).first()

    @extend_schema(tags=["batches"], responses={200: BatchDetailSerializer, 404: dict})
    def get(self, request, batch_id, *args, **kwargs):
        batch = self._batch(request, batch_id)
        if batch is None:
            return _not_found("Batch")
        return Response(BatchDetailSerializer(batch).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["batches"],
        request=BatchUpdateSerializer,
        responses={200: BatchDetailSerializer, 400: dict, 402: dict, 404: dict, 409: dict},
    )
    def put(self, request, batch_id, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        result = operations.update_batch(user=request.user, batch_id=batch_id, **s.validated_data)
        if not result.ok:
            return ledger_error_response(result.error)

        batch = self._batch(request, batch_id)
        return Response(BatchDetailSerializer(batch).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["batches"], responses={204: None, 404: dict})
    def delete(self, request, batch_id, *args, **kwargs):
        result = operations.delete_batch(user=request.user, batch_id=batch_id)
        if not result.ok:
            return ledger_error_response(result.error)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ============================================================
# ITEMS
# ============================================================


class ItemListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ItemCreateSerializer
    filterset_class = ItemFilter

    def get_queryset(self):
        return Item.objects.alive().filter(user=self.request.user).select_related("batch")

    @extend_schema(tags=["items"], responses=ItemSerializer(many=True))
    def get(self, request, *args, **kwargs):
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(ItemSerializer(page, many=True).data)

    @extend_schema(
        tags=["items"],
        request=ItemCreateSerializer,
        responses={201: ItemSerializer, 400: dict, 402: dict, 404: dict},
    )
    def post(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)
        batch_id = data.pop("batch")

        result = operations.create_item(user=request.user, batch_id=batch_id, **data)
        if not result.ok:
            return ledger_error_response(result.error)

        return Response(ItemSerializer(result.value).data, status=status.HTTP_201_CREATED)


class ItemDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ItemUpdateSerializer

    def _item(self, request, item_id):
        return (
            Item.objects.alive()
            .filter(pk=item_id, user=request.user)
            .select_related("batch")
            .first()
        )

    @extend_schema(tags=["items"], responses={200: ItemSerializer, 404: dict})
    def get(self, request, item_id, *args, **kwargs):
        item = self._item(request, item_id)
        if item is None:
            return _not_found("Item")
        return Response(ItemSerializer(item).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["items"],
        request=ItemUpdateSerializer,
        responses={200: ItemSerializer, 400: dict, 402: dict, 404: dict},
    )
    def put(self, request, item_id, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        result = operations.update_item(user=request.user, item_id=item_id, **s.validated_data)
        if not result.ok:
            return ledger_error_response(result.error)

        return Response(ItemSerializer(self._item(request, item_id)).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["items"], responses={204: None, 404: dict})
    def delete(self, request, item_id, *args, **kwargs):
        result = operations.delete_item(user=request.user, item_id=item_id)
        if not result.ok:
            return ledger_error_response(result.error)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ItemSellView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ItemSerializer

    @extend_schema(tags=["items"], request=None, responses={200: ItemSerializer, 404: dict, 409: dict})
    def post(self, request, item_id, *args, **kwargs):
        result = operations.register_item_sale(user=request.user, item_id=item_id)
        if not result.ok:
            return ledger_error_response(result.error)
        return Response(ItemSerializer(result.value.item).data, status=status.HTTP_200_OK)


class ItemReverseSaleView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ItemSerializer

    @extend_schema(
        tags=["items"],
        request=None,
        responses={200: ItemSerializer, 402: dict, 404: dict, 409: dict},
    )
    def post(self, request, item_id, *args, **kwargs):
        result = operations.reverse_item_sale(user=request.user, item_id=item_id)
        if not result.ok:
            return ledger_error_response(result.error)
        return Response(ItemSerializer(result.value.item).data, status=status.HTTP_200_OK)


# ============================================================
# OPERATIONAL COSTS
# ============================================================


class OperationalCostListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OperationalCostCreateSerializer
    filterset_class = OperationalCostFilter

    def get_queryset(self):
        return OperationalCost.objects.alive().filter(user=self.request.user)

    @extend_schema(tags=["operational-costs"], responses=OperationalCostSerializer(many=True))
    def get(self, request, *args, **kwargs):
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(OperationalCostSerializer(page, many=True).data)

    @extend_schema(
        tags=["operational-costs"],
        request=OperationalCostCreateSerializer,
        responses={201: OperationalCostSerializer, 400: dict, 402: dict, 404: dict},
    )
    def post(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)
        batch_id = data.pop("batch", None)

        result = operations.add_operational_cost(user=request.user, batch_id=batch_id, **data)
        if not result.ok:
            return ledger_error_response(result.error)

        return Response(OperationalCostSerializer(result.value.cost).data, status=status.HTTP_201_CREATED)


class OperationalCostDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OperationalCostUpdateSerializer

    @extend_schema(tags=["operational-costs"], responses={200: OperationalCostSerializer, 404: dict})
    def get(self, request, cost_id, *args, **kwargs):
        cost = OperationalCost.objects.alive().filter(pk=cost_id, user=request.user).first()
        if cost is None:
            return _not_found("Operational cost")
        return Response(OperationalCostSerializer(cost).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["operational-costs"],
        request=OperationalCostUpdateSerializer,
        responses={200: OperationalCostSerializer, 400: dict, 402: dict, 404: dict},
    )
    def put(self, request, cost_id, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        result = operations.update_operational_cost(user=request.user, cost_id=cost_id, **s.validated_data)
        if not result.ok:
            return ledger_error_response(result.error)

        return Response(OperationalCostSerializer(result.value.cost).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["operational-costs"], responses={204: None, 404: dict})
    def delete(self, request, cost_id, *args, **kwargs):
        result = operations.delete_operational_cost(user=request.user, cost_id=cost_id)
        if not result.ok:
            return ledger_error_response(result.error)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ============================================================
# REPORTS
# ============================================================


class ReportView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ReportQuerySerializer

    @extend_schema(tags=["reports"], parameters=[ReportQuerySerializer], responses={200: dict, 400: dict})
    def get(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.query_params)
        if not s.is_valid():
            return error_response(
                code="INVALID_INPUT",
                message="start_date and end_date are required (YYYY-MM-DD)",
                http_status=status.HTTP_400_BAD_REQUEST,
                details={"fields": s.errors},
            )

        start = s.validated_data["start_date"]
        end = s.validated_data["end_date"]
        if start > end:
            return error_response(
                code="INVALID_INPUT",
                message="start_date must be on or before end_date",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        report = build_report(request.user, start=start, end=end)
        report["batches"] = BatchSerializer(report["batches"], many=True).data
        report["items"] = ItemSerializer(report["items"], many=True).data
        report["operational_costs"] = OperationalCostSerializer(report["operational_costs"], many=True).data
        report["budget"] = BudgetSummarySerializer(report["budget"]).data
        return Response(report, status=status.HTTP_200_OK)


class DashboardView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["reports"], responses={200: dict})
    def get(self, request, *args, **kwargs):
        stats = dashboard_stats(request.user)
        stats["budget"] = BudgetSummarySerializer(stats["budget"]).data
        return Response(stats, status=status.HTTP_200_OK)
