"""Admin registrations for products app."""

from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "sku", "name", "category", "uom", "total_stock", "reorder_level", "status")
    list_filter = ("status", "category")
    search_fields = ("sku", "name")
    readonly_fields = ("total_stock",)


# EOF
