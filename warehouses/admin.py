"""Admin registrations for warehouses app."""

from django.contrib import admin

from .models import Location, Warehouse


class LocationInline(admin.TabularInline):
    model = Location
    extra = 0
    fields = ("code", "name", "type", "capacity", "parent")


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "name", "manager", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("code", "name")
    inlines = [LocationInline]


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ("id", "warehouse", "code", "name", "type", "capacity")
    list_filter = ("type",)
    search_fields = ("code", "name", "warehouse__code")


# EOF
