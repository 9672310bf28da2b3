"""Admin registrations for inventory app.

Ledger rows are append-only, so the ledger admin is read-only.
"""

from django.contrib import admin

from .models import StockLedgerEntry, StockLevel


@admin.register(StockLevel)
class StockLevelAdmin(admin.ModelAdmin):
    list_display = ("id", "product", "location", "quantity", "updated_at")
    list_select_related = ("product", "location")
    search_fields = ("product__sku", "product__name", "location__code")
    readonly_fields = ("product", "location", "quantity", "created_at", "updated_at")

    def has_add_permission(self, request):
        return False


@admin.register(StockLedgerEntry)
class StockLedgerEntryAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "movement_type",
        "document_number",
        "product",
        "location",
        "quantity",
        "quantity_before",
        "quantity_after",
        "performed_by",
        "movement_date",
    )
    list_filter = ("movement_type", "warehouse")
    search_fields = ("document_number", "product__sku", "reference")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# EOF
