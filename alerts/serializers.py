from products.serializers import ProductSummarySerializer
from rest_framework import serializers
from users.serializers import UserSummarySerializer

from .models import Alert


class AlertSerializer(serializers.ModelSerializer):
    product = ProductSummarySerializer(read_only=True)
    acknowledged_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Alert
        fields = [
            "id",
            "type",
            "product",
            "message",
            "severity",
            "status",
            "current_stock",
            "reorder_level",
            "acknowledged_by",
            "acknowledged_at",
            "resolved_at",
            "created_at",
        ]
        read_only_fields = fields


# EOF
