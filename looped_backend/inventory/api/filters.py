# inventory/api/filters.py

import django_filters

from inventory.models import Item, OperationalCost


class ItemFilter(django_filters.FilterSet):
    batch = django_filters.UUIDFilter(field_name="batch_id")
    sold_status = django_filters.ChoiceFilter(choices=Item.STATUS_CHOICES)
    category = django_filters.CharFilter(field_name="category", lookup_expr="iexact")

    class Meta:
        model = Item
        fields = ["batch", "sold_status", "category"]


class OperationalCostFilter(django_filters.FilterSet):
    batch = django_filters.UUIDFilter(field_name="batch_id")
    category = django_filters.CharFilter(field_name="category", lookup_expr="iexact")
    date_from = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="date", lookup_expr="lte")

    class Meta:
        model = OperationalCost
        fields = ["batch", "category", "date_from", "date_to"]
