"""Serializers for movement documents and their action payloads.

Document serializers accept nested `items` on create/update and delegate
persistence to `movements.services`; the status, number and validation
stamps are always read-only.
"""

from products.models import Product
from products.serializers import ProductSummarySerializer
from rest_framework import serializers
from users.models import User
from users.serializers import UserSummarySerializer
from warehouses.models import Location, Warehouse
from warehouses.serializers import LocationSummarySerializer, WarehouseSummarySerializer

from . import services
from .models import Adjustment, Delivery, DeliveryItem, Receipt, ReceiptItem, Transfer, TransferItem

DOCUMENT_READ_ONLY = ["id", "number", "status", "created_by", "canceled_at", "created_at", "updated_at"]


def _request_user(serializer):
    return serializer.context["request"].user


class ReceiptItemSerializer(serializers.ModelSerializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    product_detail = ProductSummarySerializer(source="product", read_only=True)
    location = serializers.PrimaryKeyRelatedField(queryset=Location.objects.all())
    location_code = serializers.CharField(source="location.code", read_only=True)
    quantity = serializers.IntegerField(min_value=1)

    class Meta:
        model = ReceiptItem
        fields = [
            "id",
            "product",
            "product_detail",
            "location",
            "location_code",
            "quantity",
            "expected_quantity",
            "unit_price",
            "notes",
        ]
        read_only_fields = ["id", "product_detail", "location_code"]


class ReceiptSerializer(serializers.ModelSerializer):
    warehouse = serializers.PrimaryKeyRelatedField(queryset=Warehouse.objects.all())
    warehouse_detail = WarehouseSummarySerializer(source="warehouse", read_only=True)
    items = ReceiptItemSerializer(many=True)
    created_by = UserSummarySerializer(read_only=True)
    validated_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Receipt
        fields = [
            "id",
            "number",
            "status",
            "supplier",
            "supplier_email",
            "supplier_phone",
            "warehouse",
            "warehouse_detail",
            "receipt_date",
            "expected_date",
            "reference_number",
            "notes",
            "items",
            "created_by",
            "validated_by",
            "validated_at",
            "canceled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = DOCUMENT_READ_ONLY + ["warehouse_detail", "validated_by", "validated_at"]

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one item is required.")
        return value

    def create(self, validated_data):
        return services.create_receipt(user=_request_user(self), **validated_data)

    def update(self, instance, validated_data):
        items = validated_data.pop("items", None)
        return services.update_receipt(receipt=instance, user=_request_user(self), items=items, **validated_data)


class DeliveryItemSerializer(serializers.ModelSerializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    product_detail = ProductSummarySerializer(source="product", read_only=True)
    location = serializers.PrimaryKeyRelatedField(queryset=Location.objects.all())
    location_code = serializers.CharField(source="location.code", read_only=True)
    quantity = serializers.IntegerField(min_value=1)

    class Meta:
        model = DeliveryItem
        fields = [
            "id",
            "product",
            "product_detail",
            "location",
            "location_code",
            "quantity",
            "picked_quantity",
            "packed_quantity",
        ]
        read_only_fields = ["id", "product_detail", "location_code", "picked_quantity", "packed_quantity"]


class DeliverySerializer(serializers.ModelSerializer):
    warehouse = serializers.PrimaryKeyRelatedField(queryset=Warehouse.objects.all())
    warehouse_detail = WarehouseSummarySerializer(source="warehouse", read_only=True)
    items = DeliveryItemSerializer(many=True)
    created_by = UserSummarySerializer(read_only=True)
    validated_by = UserSummarySerializer(read_only=True)
    picker = UserSummarySerializer(read_only=True)
    packer = UserSummarySerializer(read_only=True)

    class Meta:
        model = Delivery
        fields = [
            "id",
            "number",
            "status",
            "customer",
            "customer_email",
            "customer_phone",
            "shipping_address",
            "warehouse",
            "warehouse_detail",
            "scheduled_date",
            "reference_number",
            "notes",
            "items",
            "picker",
            "packer",
            "picked_at",
            "packed_at",
            "created_by",
            "validated_by",
            "validated_at",
            "canceled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = DOCUMENT_READ_ONLY + [
            "warehouse_detail",
            "picker",
            "packer",
            "picked_at",
            "packed_at",
            "validated_by",
            "validated_at",
        ]

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one item is required.")
        return value

    def create(self, validated_data):
        return services.create_delivery(user=_request_user(self), **validated_data)

    def update(self, instance, validated_data):
        items = validated_data.pop("items", None)
        return services.update_delivery(delivery=instance, user=_request_user(self), items=items, **validated_data)


class TransferItemSerializer(serializers.ModelSerializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    product_detail = ProductSummarySerializer(source="product", read_only=True)
    quantity = serializers.IntegerField(min_value=1)

    class Meta:
        model = TransferItem
        fields = ["id", "product", "product_detail", "quantity"]
        read_only_fields = ["id", "product_detail"]


class TransferSerializer(serializers.ModelSerializer):
    source_location = serializers.PrimaryKeyRelatedField(queryset=Location.objects.all())
    destination_location = serializers.PrimaryKeyRelatedField(queryset=Location.objects.all())
    source_location_detail = LocationSummarySerializer(source="source_location", read_only=True)
    destination_location_detail = LocationSummarySerializer(source="destination_location", read_only=True)
    source_warehouse = WarehouseSummarySerializer(source="source_location.warehouse", read_only=True)
    destination_warehouse = WarehouseSummarySerializer(source="destination_location.warehouse", read_only=True)
    items = TransferItemSerializer(many=True)
    created_by = UserSummarySerializer(read_only=True)
    executed_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Transfer
        fields = [
            "id",
            "number",
            "status",
            "source_location",
            "source_location_detail",
            "source_warehouse",
            "destination_location",
            "destination_location_detail",
            "destination_warehouse",
            "scheduled_date",
            "reference_number",
            "notes",
            "items",
            "created_by",
            "executed_by",
            "executed_at",
            "canceled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = DOCUMENT_READ_ONLY + [
            "source_location_detail",
            "destination_location_detail",
            "source_warehouse",
            "destination_warehouse",
            "executed_by",
            "executed_at",
        ]

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one item is required.")
        return value

    def validate(self, attrs):
        source = attrs.get("source_location", getattr(self.instance, "source_location", None))
        destination = attrs.get("destination_location", getattr(self.instance, "destination_location", None))
        if source is not None and destination is not None and source.pk == destination.pk:
            raise serializers.ValidationError({"destination_location": "Must differ from the source location."})
        return attrs

    def create(self, validated_data):
        return services.create_transfer(user=_request_user(self), **validated_data)

    def update(self, instance, validated_data):
        items = validated_data.pop("items", None)
        return services.update_transfer(transfer=instance, user=_request_user(self), items=items, **validated_data)


class AdjustmentSerializer(serializers.ModelSerializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.all())
    product_detail = ProductSummarySerializer(source="product", read_only=True)
    location = serializers.PrimaryKeyRelatedField(queryset=Location.objects.all())
    location_detail = LocationSummarySerializer(source="location", read_only=True)
    warehouse = WarehouseSummarySerializer(source="location.warehouse", read_only=True)
    counted_quantity = serializers.IntegerField(min_value=0)
    created_by = UserSummarySerializer(read_only=True)
    validated_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Adjustment
        fields = [
            "id",
            "number",
            "status",
            "product",
            "product_detail",
            "location",
            "location_detail",
            "warehouse",
            "system_quantity",
            "counted_quantity",
            "difference",
            "reason",
            "notes",
            "created_by",
            "validated_by",
            "validated_at",
            "canceled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = DOCUMENT_READ_ONLY + [
            "product_detail",
            "location_detail",
            "warehouse",
            "system_quantity",
            "difference",
            "validated_by",
            "validated_at",
        ]

    def create(self, validated_data):
        return services.create_adjustment(user=_request_user(self), **validated_data)

    def update(self, instance, validated_data):
        return services.update_adjustment(adjustment=instance, user=_request_user(self), **validated_data)


class DocumentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=["waiting", "ready"])


class AssignUserSerializer(serializers.Serializer):
    user = serializers.PrimaryKeyRelatedField(queryset=User.objects.filter(is_active=True))


class LineQuantitySerializer(serializers.Serializer):
    """One delivery line: `picked_quantity` on pick, `packed_quantity` on pack, `quantity` for either."""

    QUANTITY_FIELDS = ("picked_quantity", "packed_quantity", "quantity")

    item_id = serializers.IntegerField()
    picked_quantity = serializers.IntegerField(min_value=0, required=False)
    packed_quantity = serializers.IntegerField(min_value=0, required=False)
    quantity = serializers.IntegerField(min_value=0, required=False)

    def validate(self, attrs):
        if not any(field in attrs for field in self.QUANTITY_FIELDS):
            raise serializers.ValidationError("Each line needs picked_quantity, packed_quantity or quantity.")
        return attrs


class PickPackSerializer(serializers.Serializer):
    """Per-line quantities; omit `items` to pick or pack everything in full."""

    items = LineQuantitySerializer(many=True, required=False)


# EOF
