# inventory/api/serializers.py

from rest_framework import serializers

from inventory.models import Batch, Item, OperationalCost
from inventory.services.report_service import batch_item_metrics

MONEY = {"max_digits": 14, "decimal_places": 2}


# ============================================================
# OUTPUT
# ============================================================


class ItemSerializer(serializers.ModelSerializer):
    """
    Output serializer (DB truth) - clean, stable contract.
    """

    batch_id = serializers.UUIDField(read_only=True)
    batch_name = serializers.CharField(source="batch.name", read_only=True)

    class Meta:
        model = Item
        fields = [
            "id",
            "batch_id",
            "batch_name",
            "name",
            "category",
            "purchase_price",
            "selling_price",
            "margin_value",
            "margin_percentage",
            "sold_status",
            "total_cost",
            "image_ref",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OperationalCostSerializer(serializers.ModelSerializer):
    batch_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = OperationalCost
        fields = [
            "id",
            "batch_id",
            "name",
            "description",
            "amount",
            "date",
            "category",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BatchSerializer(serializers.ModelSerializer):
    remaining_items = serializers.IntegerField(read_only=True)
    gross_profit = serializers.DecimalField(read_only=True, **MONEY)

    class Meta:
        model = Batch
        fields = [
            "id",
            "name",
            "description",
            "purchase_date",
            "total_items",
            "total_cost",
            "total_sold",
            "total_revenue",
            "remaining_items",
            "gross_profit",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ItemMetricsSerializer(serializers.Serializer):
    allocated_cost = serializers.DecimalField(**MONEY)
    profit = serializers.DecimalField(**MONEY)
    true_margin_percentage = serializers.DecimalField(max_digits=10, decimal_places=2)
    roi_percentage = serializers.DecimalField(max_digits=10, decimal_places=2)


class BatchDetailSerializer(BatchSerializer):
    """
    Batch + live items + live operational costs + per-item metrics
    (operational costs spread evenly across the batch's items).
    """

    items = serializers.SerializerMethodField()
    operational_costs = serializers.SerializerMethodField()
    item_metrics = serializers.SerializerMethodField()

    class Meta(BatchSerializer.Meta):
        fields = BatchSerializer.Meta.fields + ["items", "operational_costs", "item_metrics"]
        read_only_fields = fields

    def get_items(self, obj):
        qs = Item.objects.alive().filter(batch=obj).select_related("batch")
        return ItemSerializer(qs, many=True).data

    def get_operational_costs(self, obj):
        return OperationalCostSerializer(OperationalCost.objects.alive().filter(batch=obj), many=True).data

    def get_item_metrics(self, obj):
        return {
            item_id: ItemMetricsSerializer(metrics).data
            for item_id, metrics in batch_item_metrics(obj).items()
        }


# ============================================================
# INPUT (Swagger-visible)
# ============================================================


class BatchItemLineSerializer(serializers.Serializer):
    id = serializers.UUIDField(required=False)
    name = serializers.CharField(required=False, max_length=255)
    category = serializers.CharField(required=False, allow_blank=True, max_length=100)
    purchase_price = serializers.DecimalField(required=False, **MONEY)
    selling_price = serializers.DecimalField(required=False, **MONEY)
    sold_status = serializers.ChoiceField(required=False, choices=[Item.STATUS_UNSOLD, Item.STATUS_SOLD])
    image_ref = serializers.CharField(required=False, allow_blank=True, max_length=500)


class BatchCostLineSerializer(serializers.Serializer):
    id = serializers.UUIDField(required=False)
    name = serializers.CharField(required=False, max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    amount = serializers.DecimalField(required=False, **MONEY)
    category = serializers.CharField(required=False, allow_blank=True, max_length=100)
    date = serializers.DateField(required=False)


NEW_ITEM_FIELDS = ("name", "purchase_price", "selling_price")
NEW_COST_FIELDS = ("name", "amount")


def _check_new_lines(lines, required, label):
    """Lines without an id create rows and need every required field."""
    for index, line in enumerate(lines or []):
        if line.get("id"):
            continue
        missing = [f for f in required if line.get(f) is None]
        if missing:
            raise serializers.ValidationError(
                {label: f"Line {index}: missing {', '.join(missing)}"}
            )


class BatchCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    purchase_date = serializers.DateField(required=False)
    items = BatchItemLineSerializer(many=True, required=False, default=list)
    operational_costs = BatchCostLineSerializer(many=True, required=False, default=list)

    def validate(self, attrs):
        for line in attrs.get("items", []):
            if line.get("id"):
                raise serializers.ValidationError({"items": "New batches cannot reference existing items"})
        for line in attrs.get("operational_costs", []):
            if line.get("id"):
                raise serializers.ValidationError(
                    {"operational_costs": "New batches cannot reference existing costs"}
                )
        _check_new_lines(attrs.get("items"), NEW_ITEM_FIELDS, "items")
        _check_new_lines(attrs.get("operational_costs"), NEW_COST_FIELDS, "operational_costs")
        return attrs


class BatchUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    purchase_date = serializers.DateField(required=False)
    items = BatchItemLineSerializer(many=True, required=False)
    operational_costs = BatchCostLineSerializer(many=True, required=False)

    def validate(self, attrs):
        _check_new_lines(attrs.get("items"), NEW_ITEM_FIELDS, "items")
        _check_new_lines(attrs.get("operational_costs"), NEW_COST_FIELDS, "operational_costs")
        return attrs


class ItemCreateSerializer(serializers.Serializer):
    batch = serializers.UUIDField()
    name = serializers.CharField(max_length=255)
    category = serializers.CharField(required=False, allow_blank=True, default="")
    purchase_price = serializers.DecimalField(**MONEY)
    selling_price = serializers.DecimalField(**MONEY)
    sold_status = serializers.ChoiceField(
        required=False,
        choices=[Item.STATUS_UNSOLD, Item.STATUS_SOLD],
        default=Item.STATUS_UNSOLD,
    )
    image_ref = serializers.CharField(required=False, allow_blank=True, default="")


class ItemUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, max_length=255)
    category = serializers.CharField(required=False, allow_blank=True, max_length=100)
    purchase_price = serializers.DecimalField(required=False, **MONEY)
    selling_price = serializers.DecimalField(required=False, **MONEY)
    sold_status = serializers.ChoiceField(required=False, choices=[Item.STATUS_UNSOLD, Item.STATUS_SOLD])
    image_ref = serializers.CharField(required=False, allow_blank=True, max_length=500)


class OperationalCostCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(**MONEY)
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    batch = serializers.UUIDField(required=False, allow_null=True)
    date = serializers.DateField(required=False)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class OperationalCostUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, max_length=255)
    amount = serializers.DecimalField(required=False, **MONEY)
    category = serializers.CharField(required=False, allow_blank=True)
    date = serializers.DateField(required=False)
    description = serializers.CharField(required=False, allow_blank=True)


class ReportQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
