# budget/api/views.py

"""
PATH: budget/api/views.py

BUDGET API

GET  /api/budget/
    - Balance + per-kind statistics for the caller
POST /api/budget/
    - Top-up (positive amount only)
GET  /api/budget/transactions/?kind=&include_voided=
    - Caller's transaction log, newest first
POST /api/budget/transactions/<id>/void/
    - Correction: hide one transaction from the balance

Every write goes through the operation API; business failures come back
as the canonical error body.
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from budget.api.errors import error_response, ledger_error_response
from budget.api.serializers import (
    BudgetSummarySerializer,
    BudgetTransactionSerializer,
    TopUpResultSerializer,
    TopUpSerializer,
    VoidTransactionSerializer,
)
from budget.models import BudgetTransaction
from budget.services.ledger_service import list_transactions
from inventory.services import operations


class BudgetView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = TopUpSerializer

    @extend_schema(tags=["budget"], responses=BudgetSummarySerializer)
    def get(self, request, *args, **kwargs):
        result = operations.get_budget_summary(user=request.user)
        if not result.ok:
            return ledger_error_response(result.error)
        return Response(BudgetSummarySerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["budget"],
        request=TopUpSerializer,
        responses={201: TopUpResultSerializer, 400: dict},
    )
    def post(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        result = operations.top_up(
            user=request.user,
            amount=data["amount"],
            description=data.get("description"),
        )
        if not result.ok:
            return ledger_error_response(result.error)

        return Response(TopUpResultSerializer(result.value).data, status=status.HTTP_201_CREATED)


class BudgetTransactionListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = BudgetTransactionSerializer

    def get_queryset(self):
        params = self.request.query_params
        include_voided = (params.get("include_voided") or "").lower() in ("1", "true", "yes")
        return list_transactions(
            self.request.user,
            kind=(params.get("kind") or "").strip() or None,
            include_voided=include_voided,
        )

    @extend_schema(
        tags=["budget"],
        parameters=[
            OpenApiParameter("kind", str, enum=BudgetTransaction.Kind.values),
            OpenApiParameter("include_voided", bool),
        ],
        responses=BudgetTransactionSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        kind = (request.query_params.get("kind") or "").strip()
        if kind and kind not in BudgetTransaction.Kind.values:
            return error_response(
                code="INVALID_INPUT",
                message=f"Unknown transaction kind: {kind}",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        page = self.paginate_queryset(self.get_queryset())
        data = self.get_serializer(page, many=True).data
        return self.get_paginated_response(data)


class VoidTransactionView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = VoidTransactionSerializer

    @extend_schema(
        tags=["budget"],
        request=VoidTransactionSerializer,
        responses={200: TopUpResultSerializer, 404: dict},
    )
    def post(self, request, transaction_id, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        result = operations.void_transaction(
            user=request.user,
            transaction_id=transaction_id,
            reason=s.validated_data.get("reason", ""),
        )
        if not result.ok:
            return ledger_error_response(result.error)

        return Response(TopUpResultSerializer(result.value).data, status=status.HTTP_200_OK)
