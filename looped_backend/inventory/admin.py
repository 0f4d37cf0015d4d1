from django.contrib import admin

from inventory.models import Batch, Item, OperationalCost


class ReadOnlyLedgerBackedAdmin(admin.ModelAdmin):
    """
    Rows here move money through the budget ledger; edits must go through
    the API so the ledger stays in step.
    """

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Batch)
class BatchAdmin(ReadOnlyLedgerBackedAdmin):
    list_display = ("name", "user", "purchase_date", "total_items", "total_sold", "total_cost", "total_revenue", "deleted_at")
    list_filter = ("purchase_date",)
    search_fields = ("name",)


@admin.register(Item)
class ItemAdmin(ReadOnlyLedgerBackedAdmin):
    list_display = ("name", "batch", "purchase_price", "selling_price", "sold_status", "deleted_at")
    list_filter = ("sold_status",)
    search_fields = ("name", "batch__name")


@admin.register(OperationalCost)
class OperationalCostAdmin(ReadOnlyLedgerBackedAdmin):
    list_display = ("name", "category", "amount", "date", "batch", "deleted_at")
    list_filter = ("category",)
    search_fields = ("name",)
