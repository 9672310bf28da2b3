"""Stock alerts raised when a product falls below its reorder level."""

from common.choices import AlertSeverity, AlertStatus, AlertType
from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Alert(TimeStampedModel):
    """Alert lifecycle: Active -> Acknowledged -> Resolved (or Active -> Resolved).

    `current_stock` and `reorder_level` snapshot the product when the alert
    was raised.
    """

    TYPE_LOW_STOCK = AlertType.LOW_STOCK
    TYPE_OUT_OF_STOCK = AlertType.OUT_OF_STOCK
    TYPE_CRITICAL_STOCK = AlertType.CRITICAL_STOCK
    TYPE_REORDER_SUGGESTION = AlertType.REORDER_SUGGESTION
    TYPE_CHOICES = AlertType.choices
    MONITORED_TYPES = (TYPE_LOW_STOCK, TYPE_OUT_OF_STOCK, TYPE_CRITICAL_STOCK)

    SEVERITY_CHOICES = AlertSeverity.choices

    STATUS_ACTIVE = AlertStatus.ACTIVE
    STATUS_ACKNOWLEDGED = AlertStatus.ACKNOWLEDGED
    STATUS_RESOLVED = AlertStatus.RESOLVED
    STATUS_CHOICES = AlertStatus.choices

    type = models.CharField(max_length=32, choices=TYPE_CHOICES, db_index=True)
    product = models.ForeignKey("products.Product", related_name="alerts", on_delete=models.CASCADE)
    message = models.CharField(max_length=500)
    severity = models.CharField(max_length=16, choices=SEVERITY_CHOICES, default=AlertSeverity.MEDIUM)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    acknowledged_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, related_name="+", on_delete=models.SET_NULL
    )
    acknowledged_at = models.DateTimeField(null=True, blank=True)
    resolved_at = models.DateTimeField(null=True, blank=True)
    current_stock = models.IntegerField(default=0)
    reorder_level = models.IntegerField(default=0)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["product", "status"], name="alert_product_status_idx"),
            models.Index(fields=["status", "severity"], name="alert_status_severity_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Alert#{self.id} {self.type} product={self.product_id} status={self.status}"


# EOF
