from django.contrib import admin

from .models import Alert


@admin.register(Alert)
class AlertAdmin(admin.ModelAdmin):
    list_display = ("id", "type", "product", "severity", "status", "current_stock", "reorder_level", "created_at")
    list_filter = ("status", "severity", "type")
    search_fields = ("product__sku", "product__name", "message")
    readonly_fields = ("acknowledged_by", "acknowledged_at", "resolved_at", "created_at", "updated_at")


# EOF
