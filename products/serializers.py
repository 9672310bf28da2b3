"""Serializers for products.

`total_stock` and `stock_by_location` are read-only: stock only changes
through movement documents.
"""

from inventory.selectors import stock_by_location
from rest_framework import serializers

from .models import Product
from .services import create_product


class ProductSerializer(serializers.ModelSerializer):
    sku = serializers.CharField(max_length=64, required=False, allow_blank=True)
    stock_by_location = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "sku",
            "category",
            "uom",
            "description",
            "total_stock",
            "stock_by_location",
            "reorder_level",
            "reorder_quantity",
            "max_stock",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "total_stock", "stock_by_location", "created_at", "updated_at"]

    def get_stock_by_location(self, obj: Product) -> dict:
        return stock_by_location(obj)

    def validate_sku(self, value: str) -> str:
        value = (value or "").strip().upper()
        if not value:
            if self.instance is not None:
                raise serializers.ValidationError("SKU cannot be blank.")
            return value
        qs = Product.objects.filter(sku=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Product with this SKU already exists.")
        return value

    def create(self, validated_data):
        return create_product(**validated_data)


class ProductSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "name", "sku", "uom", "total_stock"]
        read_only_fields = fields


# EOF
