"""Admin registrations for movement documents.

Stock only changes through the API validation endpoints, so documents are
read-only here once they leave draft.
"""

from django.contrib import admin

from .models import Adjustment, Delivery, DeliveryItem, Receipt, ReceiptItem, Transfer, TransferItem


class ReceiptItemInline(admin.TabularInline):
    model = ReceiptItem
    extra = 0


class DeliveryItemInline(admin.TabularInline):
    model = DeliveryItem
    extra = 0
    readonly_fields = ("picked_quantity", "packed_quantity")


class TransferItemInline(admin.TabularInline):
    model = TransferItem
    extra = 0


class DocumentAdmin(admin.ModelAdmin):
    readonly_fields = ("number", "status", "created_by", "canceled_at", "created_at", "updated_at")
    list_filter = ("status",)

    def has_change_permission(self, request, obj=None):
        if obj is not None and obj.status != obj.STATUS_DRAFT:
            return False
        return super().has_change_permission(request, obj)

    def has_add_permission(self, request):
        return False


@admin.register(Receipt)
class ReceiptAdmin(DocumentAdmin):
    list_display = ("number", "supplier", "warehouse", "status", "validated_at", "created_at")
    search_fields = ("number", "supplier", "reference_number")
    inlines = [ReceiptItemInline]


@admin.register(Delivery)
class DeliveryAdmin(DocumentAdmin):
    list_display = ("number", "customer", "warehouse", "status", "picker", "packer", "validated_at")
    search_fields = ("number", "customer", "reference_number")
    inlines = [DeliveryItemInline]


@admin.register(Transfer)
class TransferAdmin(DocumentAdmin):
    list_display = ("number", "source_location", "destination_location", "status", "executed_at")
    search_fields = ("number", "reference_number")
    inlines = [TransferItemInline]


@admin.register(Adjustment)
class AdjustmentAdmin(DocumentAdmin):
    list_display = ("number", "product", "location", "counted_quantity", "difference", "status", "validated_at")
    search_fields = ("number", "product__sku", "reason")


# EOF
