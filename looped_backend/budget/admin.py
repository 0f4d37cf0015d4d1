from django.contrib import admin

from budget.models import Budget, BudgetTransaction


@admin.register(Budget)
class BudgetAdmin(admin.ModelAdmin):
    list_display = ("user", "current_amount", "updated_at")
    search_fields = ("user__username", "user__email")
    readonly_fields = ("user", "current_amount", "created_at", "updated_at")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(BudgetTransaction)
class BudgetTransactionAdmin(admin.ModelAdmin):
    list_display = ("created_at", "user", "kind", "amount", "description", "deleted_at")
    list_filter = ("kind",)
    search_fields = ("description", "reference_id")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
