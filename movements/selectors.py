"""Document querysets scoped to what the requesting user may see."""

from django.db.models import Q

from .models import Adjustment, Delivery, Receipt, Transfer


def _is_scoped(user) -> bool:
    return getattr(user, "is_warehouse_staff", False) and not user.is_superuser


def receipts_for_user(user):
    qs = Receipt.objects.select_related("warehouse", "created_by", "validated_by").prefetch_related(
        "items__product", "items__location"
    )
    if _is_scoped(user):
        qs = qs.filter(warehouse_id=user.assigned_warehouse_id)
    return qs.order_by("-created_at", "-id")


def deliveries_for_user(user):
    qs = Delivery.objects.select_related(
        "warehouse", "created_by", "validated_by", "picker", "packer"
    ).prefetch_related("items__product", "items__location")
    if _is_scoped(user):
        qs = qs.filter(warehouse_id=user.assigned_warehouse_id)
    return qs.order_by("-created_at", "-id")


def transfers_for_user(user):
    qs = Transfer.objects.select_related(
        "source_location__warehouse", "destination_location__warehouse", "created_by", "executed_by"
    ).prefetch_related("items__product")
    if _is_scoped(user):
        warehouse_id = user.assigned_warehouse_id
        qs = qs.filter(
            Q(source_location__warehouse_id=warehouse_id) | Q(destination_location__warehouse_id=warehouse_id)
        )
    return qs.order_by("-created_at", "-id")


def adjustments_for_user(user):
    qs = Adjustment.objects.select_related("product", "location__warehouse", "created_by", "validated_by")
    if _is_scoped(user):
        qs = qs.filter(location__warehouse_id=user.assigned_warehouse_id)
    return qs.order_by("-created_at", "-id")


def my_tasks(user) -> dict:
    """Open deliveries where `user` is the assigned picker or packer."""
    open_deliveries = deliveries_for_user(user).exclude(status__in=[Delivery.STATUS_DONE, Delivery.STATUS_CANCELED])
    return {
        "picking": list(open_deliveries.filter(picker=user)),
        "packing": list(open_deliveries.filter(packer=user)),
    }


# EOF
