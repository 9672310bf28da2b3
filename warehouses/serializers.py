"""Serializers for warehouses and their storage locations."""

from rest_framework import serializers
from users.serializers import UserSummarySerializer

from .models import Location, Warehouse


class LocationSerializer(serializers.ModelSerializer):
    """Storage location; `code` is uppercased and unique within its warehouse."""

    class Meta:
        model = Location
        fields = ["id", "warehouse", "name", "code", "type", "capacity", "parent", "created_at"]
        read_only_fields = ["id", "warehouse", "created_at"]

    def validate_code(self, value: str) -> str:
        return value.strip().upper()

    def validate(self, attrs):
        warehouse = self.context.get("warehouse") or getattr(self.instance, "warehouse", None)
        code = attrs.get("code")
        if warehouse is not None and code:
            qs = Location.objects.filter(warehouse=warehouse, code=code)
            if self.instance is not None:
                qs = qs.exclude(pk=self.instance.pk)
            if qs.exists():
                raise serializers.ValidationError({"code": "Location with this code already exists in this warehouse."})
        parent = attrs.get("parent")
        if parent is not None and warehouse is not None and parent.warehouse_id != warehouse.id:
            raise serializers.ValidationError({"parent": "Parent location must belong to the same warehouse."})
        return attrs


class WarehouseSerializer(serializers.ModelSerializer):
    locations = LocationSerializer(many=True, read_only=True)
    manager_detail = UserSummarySerializer(source="manager", read_only=True)

    class Meta:
        model = Warehouse
        fields = [
            "id",
            "name",
            "code",
            "address",
            "contact_phone",
            "contact_email",
            "manager",
            "manager_detail",
            "status",
            "locations",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "manager_detail", "locations", "created_at", "updated_at"]

    def validate_code(self, value: str) -> str:
        value = value.strip().upper()
        qs = Warehouse.objects.filter(code=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Warehouse with this code already exists.")
        return value


class WarehouseSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Warehouse
        fields = ["id", "name", "code"]
        read_only_fields = fields


class LocationSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Location
        fields = ["id", "code", "name", "warehouse"]
        read_only_fields = fields


# EOF
