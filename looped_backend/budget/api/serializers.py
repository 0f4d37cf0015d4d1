# budget/api/serializers.py

from rest_framework import serializers

from budget.models import BudgetTransaction


class BudgetTransactionSerializer(serializers.ModelSerializer):
    """
    Output serializer (ledger truth). Read-only by construction.
    """

    is_voided = serializers.BooleanField(read_only=True)

    class Meta:
        model = BudgetTransaction
        fields = [
            "id",
            "amount",
            "kind",
            "description",
            "reference_id",
            "reference_type",
            "created_at",
            "deleted_at",
            "is_voided",
        ]
        read_only_fields = fields


class KindStatisticsSerializer(serializers.Serializer):
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    count = serializers.IntegerField()


class BudgetStatisticsSerializer(serializers.Serializer):
    by_kind = serializers.DictField(child=KindStatisticsSerializer())
    transaction_count = serializers.IntegerField()


class BudgetSummarySerializer(serializers.Serializer):
    current_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    ledger_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    budget_created_at = serializers.DateTimeField(allow_null=True)
    budget_updated_at = serializers.DateTimeField(allow_null=True)
    statistics = BudgetStatisticsSerializer()


class TopUpSerializer(serializers.Serializer):
    """
    Input serializer (Swagger-visible).
    """

    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )


class TopUpResultSerializer(serializers.Serializer):
    transaction = BudgetTransactionSerializer()
    previous_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    updated_balance = serializers.DecimalField(max_digits=14, decimal_places=2)


class VoidTransactionSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)
