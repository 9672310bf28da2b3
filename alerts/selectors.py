from .models import Alert


def alerts_queryset(*, status: str = None, severity: str = None, alert_type: str = None):
    qs = Alert.objects.select_related("product", "acknowledged_by").order_by("-created_at", "-id")
    if status:
        qs = qs.filter(status=status)
    if severity:
        qs = qs.filter(severity=severity)
    if alert_type:
        qs = qs.filter(type=alert_type)
    return qs


def alert_summary() -> dict:
    active = Alert.objects.filter(status=Alert.STATUS_ACTIVE)
    return {
        "active_alerts": active.count(),
        "critical_alerts": active.filter(severity="Critical").count(),
        "high_alerts": active.filter(severity="High").count(),
        "recent_alerts": list(active.select_related("product").order_by("-created_at", "-id")[:10]),
    }


# EOF
