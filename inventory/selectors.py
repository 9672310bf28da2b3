"""Read-side queries for stock levels, the ledger and the dashboard."""

from alerts.models import Alert
from django.db.models import F, Q, Sum
from django.utils.dateparse import parse_date, parse_datetime
from movements.models import Adjustment, Delivery, Receipt, Transfer
from products.models import Product
from rest_framework.exceptions import ValidationError
from users.permissions import ensure_warehouse_access
from warehouses.models import Warehouse

from .models import StockLedgerEntry, StockLevel

TERMINAL_STATUSES = ("done", "canceled")


def stock_by_location(product: Product) -> dict:
    """Return the product's stock map keyed by location id (as a string)."""
    rows = StockLevel.objects.filter(product_id=product.pk).values_list("location_id", "quantity")
    return {str(location_id): int(quantity) for location_id, quantity in rows}


def stock_breakdown_for_product(product: Product) -> list:
    qs = (
        StockLevel.objects.filter(product_id=product.pk)
        .select_related("location", "location__warehouse")
        .order_by("location__warehouse__code", "location__code")
    )
    return [
        {
            "location": s.location_id,
            "location_code": s.location.code,
            "warehouse": s.location.warehouse_id,
            "warehouse_code": s.location.warehouse.code,
            "quantity": int(s.quantity),
        }
        for s in qs
    ]


def _parse_bound(name: str, value: str, *, end: bool = False) -> dict:
    # Date-only values bound whole days.
    try:
        day = parse_date(value)
        dt = None if day is not None else parse_datetime(value)
    except ValueError:
        day = dt = None
    if day is not None:
        return {"movement_date__date__lte" if end else "movement_date__date__gte": day}
    if dt is not None:
        return {"movement_date__lte" if end else "movement_date__gte": dt}
    raise ValidationError({name: "Expected an ISO date or datetime."})


def _parse_id(name: str, value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError({name: "Expected an integer id."})


def touches_warehouse(warehouse_id) -> Q:
    return (
        Q(warehouse_id=warehouse_id)
        | Q(source_warehouse_id=warehouse_id)
        | Q(destination_warehouse_id=warehouse_id)
    )


def ledger_entries(
    *,
    user,
    movement_type: str = None,
    product_id=None,
    warehouse_id=None,
    location_id=None,
    start_date: str = None,
    end_date: str = None,
):
    """Ledger rows visible to `user`, newest first.

    Warehouse staff only see rows they performed in their assigned warehouse;
    asking for any other warehouse raises ScopeError.
    """
    qs = StockLedgerEntry.objects.select_related(
        "product",
        "warehouse",
        "location",
        "source_warehouse",
        "source_location",
        "destination_warehouse",
        "destination_location",
        "performed_by",
    ).order_by("-movement_date", "-id")

    if warehouse_id:
        warehouse_id = _parse_id("warehouse", warehouse_id)
    if getattr(user, "is_warehouse_staff", False) and not user.is_superuser:
        if warehouse_id:
            ensure_warehouse_access(user, warehouse_id)
        if user.assigned_warehouse_id:
            qs = qs.filter(touches_warehouse(user.assigned_warehouse_id))
        qs = qs.filter(performed_by=user)
    elif warehouse_id:
        qs = qs.filter(touches_warehouse(warehouse_id))

    if movement_type:
        qs = qs.filter(movement_type=movement_type)
    if product_id:
        qs = qs.filter(product_id=_parse_id("product", product_id))
    if location_id:
        qs = qs.filter(location_id=_parse_id("location", location_id))
    if start_date:
        qs = qs.filter(**_parse_bound("start_date", start_date))
    if end_date:
        qs = qs.filter(**_parse_bound("end_date", end_date, end=True))
    return qs


def dashboard_stats() -> dict:
    products = Product.objects.filter(status=Product.STATUS_ACTIVE)
    return {
        "total_products": products.count(),
        "low_stock_products": products.filter(total_stock__lt=F("reorder_level")).count(),
        "out_of_stock_products": products.filter(total_stock=0).count(),
        "pending_receipts": Receipt.objects.exclude(status__in=TERMINAL_STATUSES).count(),
        "pending_deliveries": Delivery.objects.exclude(status__in=TERMINAL_STATUSES).count(),
        "pending_transfers": Transfer.objects.exclude(status__in=TERMINAL_STATUSES).count(),
        "pending_adjustments": Adjustment.objects.exclude(status__in=TERMINAL_STATUSES).count(),
        "active_alerts": Alert.objects.filter(status=Alert.STATUS_ACTIVE).count(),
    }


def warehouse_stock_totals() -> list:
    totals = dict(
        StockLevel.objects.values("location__warehouse_id")
        .annotate(total=Sum("quantity"))
        .values_list("location__warehouse_id", "total")
    )
    return [
        {
            "warehouse": w.id,
            "code": w.code,
            "name": w.name,
            "total_units": int(totals.get(w.id) or 0),
        }
        for w in Warehouse.objects.order_by("code")
    ]


# EOF
