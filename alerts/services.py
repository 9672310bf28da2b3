"""Alert generation and lifecycle transitions."""

import logging

from common.choices import AlertSeverity
from common.exceptions import InvalidStateError
from django.db import transaction
from django.db.models import F
from django.utils import timezone
from products.models import Product

from .models import Alert

logger = logging.getLogger("stockmaster.alerts")


def classify_stock(total_stock: int, reorder_level: int):
    """Return ``(type, severity)`` for a product below its reorder level, else None."""
    if total_stock >= reorder_level:
        return None
    if total_stock == 0:
        return Alert.TYPE_OUT_OF_STOCK, AlertSeverity.CRITICAL
    if total_stock < reorder_level / 2:
        return Alert.TYPE_CRITICAL_STOCK, AlertSeverity.HIGH
    return Alert.TYPE_LOW_STOCK, AlertSeverity.MEDIUM


def _message(product: Product, alert_type: str) -> str:
    label = f"{product.name} (SKU: {product.sku})"
    if alert_type == Alert.TYPE_OUT_OF_STOCK:
        return f"{label} is out of stock!"
    levels = f"Current stock: {product.total_stock}, Reorder level: {product.reorder_level}"
    if alert_type == Alert.TYPE_CRITICAL_STOCK:
        return f"{label} is critically low. {levels}"
    return f"{label} is running low. {levels}"


@transaction.atomic
def generate_alerts() -> list:
    """Raise one alert per active product below its reorder level.

    Products that already have an Active low/out/critical alert are skipped,
    so running the scan twice without stock changes creates nothing new.
    """
    candidates = Product.objects.filter(
        status=Product.STATUS_ACTIVE, total_stock__lt=F("reorder_level")
    ).order_by("id")
    already_alerted = set(
        Alert.objects.filter(status=Alert.STATUS_ACTIVE, type__in=Alert.MONITORED_TYPES).values_list(
            "product_id", flat=True
        )
    )
    created = []
    for product in candidates:
        if product.id in already_alerted:
            continue
        alert_type, severity = classify_stock(product.total_stock, product.reorder_level)
        created.append(
            Alert.objects.create(
                type=alert_type,
                product=product,
                message=_message(product, alert_type),
                severity=severity,
                current_stock=product.total_stock,
                reorder_level=product.reorder_level,
            )
        )
    logger.info(
        "alerts_generated",
        extra={"event": "alerts_generated", "alerts_created": len(created), "scanned": len(candidates)},
    )
    return created


def _lock(alert: Alert) -> Alert:
    return Alert.objects.select_for_update().get(pk=alert.pk)


def _log_transition(alert: Alert, prev: str, user) -> None:
    logger.info(
        "alert_status_changed",
        extra={
            "event": "alert_status_changed",
            "alert_id": alert.id,
            "product_id": alert.product_id,
            "status_from": prev,
            "status_to": alert.status,
            "user_id": getattr(user, "id", None),
        },
    )


@transaction.atomic
def acknowledge_alert(*, alert: Alert, user) -> Alert:
    alert = _lock(alert)
    if alert.status != Alert.STATUS_ACTIVE:
        raise InvalidStateError(f"Only active alerts can be acknowledged (alert is {alert.status})")
    prev = alert.status
    alert.status = Alert.STATUS_ACKNOWLEDGED
    alert.acknowledged_by = user
    alert.acknowledged_at = timezone.now()
    alert.save(update_fields=["status", "acknowledged_by", "acknowledged_at", "updated_at"])
    _log_transition(alert, prev, user)
    return alert


@transaction.atomic
def resolve_alert(*, alert: Alert, user) -> Alert:
    alert = _lock(alert)
    if alert.status == Alert.STATUS_RESOLVED:
        raise InvalidStateError("Alert is already resolved")
    prev = alert.status
    alert.status = Alert.STATUS_RESOLVED
    alert.resolved_at = timezone.now()
    alert.save(update_fields=["status", "resolved_at", "updated_at"])
    _log_transition(alert, prev, user)
    return alert


# EOF
