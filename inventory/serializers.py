"""Serializers for inventory domain.

Read-only serializers for stock levels and ledger entries. Related objects
are embedded as compact summaries.
"""

from products.serializers import ProductSummarySerializer
from rest_framework import serializers
from users.serializers import UserSummarySerializer
from warehouses.serializers import LocationSummarySerializer, WarehouseSummarySerializer

from .models import StockLedgerEntry, StockLevel


class StockLevelSerializer(serializers.ModelSerializer):
    sku = serializers.CharField(source="product.sku", read_only=True)
    location_code = serializers.CharField(source="location.code", read_only=True)

    class Meta:
        model = StockLevel
        fields = ["id", "product", "sku", "location", "location_code", "quantity", "updated_at"]
        read_only_fields = fields


class StockLedgerEntrySerializer(serializers.ModelSerializer):
    """Read-only representation of a ledger row.

    ``quantity`` is signed; ``quantity_after`` always equals
    ``quantity_before + quantity``.
    """

    product = ProductSummarySerializer(read_only=True)
    warehouse = WarehouseSummarySerializer(read_only=True)
    location = LocationSummarySerializer(read_only=True)
    source_warehouse = WarehouseSummarySerializer(read_only=True)
    source_location = LocationSummarySerializer(read_only=True)
    destination_warehouse = WarehouseSummarySerializer(read_only=True)
    destination_location = LocationSummarySerializer(read_only=True)
    performed_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = StockLedgerEntry
        fields = [
            "id",
            "movement_type",
            "document_id",
            "document_number",
            "product",
            "warehouse",
            "location",
            "quantity",
            "quantity_before",
            "quantity_after",
            "source_warehouse",
            "source_location",
            "destination_warehouse",
            "destination_location",
            "reference",
            "notes",
            "performed_by",
            "movement_date",
        ]
        read_only_fields = fields


# EOF
